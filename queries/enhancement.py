"""AI photo-enhancement analysis for a single photo.

A 404 from the enhancement endpoint means "not analysed yet" and is raised
as ``EnhancementNotFoundError``, which the cache never retries.
"""

from __future__ import annotations

from http_client import EnhancementNotFoundError, NotFoundError
from models import PhotoEnhancementAnalysis
from notifications import ANALYSIS_MESSAGES, REANALYSIS_MESSAGES, Toast
from query_cache import QueryKey, make_key
from site_client import SiteClient

ENHANCEMENT_RETRY_LIMIT = 3


def enhancement_key(photo_id: int) -> QueryKey:
    return make_key("/api/photos", photo_id, "enhancement")


async def get_photo_enhancement(client: SiteClient, photo_id: int) -> PhotoEnhancementAnalysis:
    async def _load() -> PhotoEnhancementAnalysis:
        try:
            data = await client.http.request("GET", f"/api/photos/{photo_id}/enhancement")
        except NotFoundError as exc:
            raise EnhancementNotFoundError(photo_id) from exc
        return PhotoEnhancementAnalysis.from_api(data)

    return await client.cache.fetch(enhancement_key(photo_id), _load, retry=ENHANCEMENT_RETRY_LIMIT)


async def _run_analysis(
    client: SiteClient,
    photo_id: int,
    endpoint: str,
    done_title: str,
    score_label: str,
    error_title: str,
    friendly: dict,
) -> PhotoEnhancementAnalysis:
    async def _send() -> PhotoEnhancementAnalysis:
        data = await client.http.request("POST", f"/api/photos/{photo_id}/{endpoint}")
        return PhotoEnhancementAnalysis.from_api(data)

    def _summary(analysis: PhotoEnhancementAnalysis) -> Toast:
        return Toast(
            done_title,
            f"{score_label}: {analysis.overall_score}/10. "
            f"Nalezeno {len(analysis.suggestions)} návrhů na vylepšení.",
        )

    return await client.mutate(
        _send,
        on_success=lambda analysis: client.cache.set_query_data(enhancement_key(photo_id), analysis),
        success_toast=_summary,
        error_title=error_title,
        friendly_errors=friendly,
    )


async def analyze_photo(client: SiteClient, photo_id: int) -> PhotoEnhancementAnalysis:
    """Run the first analysis and store the result under the photo's key."""
    return await _run_analysis(
        client, photo_id, "analyze",
        done_title="Analýza dokončena",
        score_label="Celkové skóre",
        error_title="Chyba při analýze",
        friendly=ANALYSIS_MESSAGES,
    )


async def reanalyze_photo(client: SiteClient, photo_id: int) -> PhotoEnhancementAnalysis:
    return await _run_analysis(
        client, photo_id, "reanalyze",
        done_title="Znovuanalýza dokončena",
        score_label="Aktualizované skóre",
        error_title="Chyba při znovuanalýze",
        friendly=REANALYSIS_MESSAGES,
    )


async def update_enhancement_visibility(client: SiteClient, photo_id: int, is_visible: bool) -> None:
    async def _send() -> None:
        await client.http.request(
            "PATCH", f"/api/photos/{photo_id}/enhancement/visibility", {"isVisible": is_visible}
        )

    if is_visible:
        toast = Toast("Návrhy zobrazeny", "Návrhy na vylepšení jsou nyní viditelné pro hosty")
    else:
        toast = Toast("Návrhy skryty", "Návrhy na vylepšení jsou skryty před hosty")

    await client.mutate(
        _send,
        invalidates=[enhancement_key(photo_id)],
        success_toast=toast,
        error_title="Chyba při aktualizaci",
    )
