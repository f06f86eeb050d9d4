"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, keeping the route handlers thin.
"""
from fastapi import Depends, Request

from naver_rank.application.interfaces.balance_service import BalanceService
from naver_rank.application.interfaces.candidate_source import CandidateSourceProvider
from naver_rank.application.interfaces.keyword_insights import (
    KeywordInsightsProvider,
    MainKeywordSource,
)
from naver_rank.application.interfaces.rank_history_store import RankHistoryStore
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.application.use_cases.check_rank import CheckRank
from naver_rank.application.use_cases.compare_ranks import CompareRanks
from naver_rank.application.use_cases.extract_main_keywords import ExtractMainKeywords
from naver_rank.application.use_cases.get_rank_history import GetRankHistory
from naver_rank.application.use_cases.keyword_trend import GetKeywordTrend
from naver_rank.application.use_cases.keyword_volume import GetKeywordVolume
from naver_rank.application.use_cases.resolve_many import BatchRankResolver
from naver_rank.application.use_cases.resolve_rank import RankResolver
from naver_rank.config import settings
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.domain.services.point_costs import PointCostSchedule
from naver_rank.infrastructure.browser.session import BrowserSession
from naver_rank.infrastructure.database import connection
from naver_rank.infrastructure.database.repositories.balance_service_impl import (
    NoOpBalanceService,
    SqlAlchemyBalanceService,
)
from naver_rank.infrastructure.database.repositories.rank_history_store_impl import (
    NoOpRankHistoryStore,
    SqlAlchemyRankHistoryStore,
)
from naver_rank.infrastructure.external_services.keyword_insights_provider import (
    NaverKeywordInsightsProvider,
)
from naver_rank.infrastructure.external_services.naver_search_client import NaverSearchClient
from naver_rank.infrastructure.sources import rendered_page_source, search_api_source
from naver_rank.infrastructure.sources.place_keyword_source import PlaceMainKeywordSource
from naver_rank.infrastructure.sources.provider import NaverCandidateSourceProvider


# ---- Low-level dependencies ------------------------------------------------

def get_browser_session(request: Request) -> BrowserSession:
    return request.app.state.browser_session


def get_search_client() -> NaverSearchClient:
    return NaverSearchClient()


def get_balance_service() -> BalanceService:
    if connection.AsyncSessionLocal is None:
        return NoOpBalanceService()
    return SqlAlchemyBalanceService(connection.AsyncSessionLocal)


def get_history_store() -> RankHistoryStore:
    if connection.AsyncSessionLocal is None:
        return NoOpRankHistoryStore()
    return SqlAlchemyRankHistoryStore(connection.AsyncSessionLocal)


def get_points_gate(balance: BalanceService = Depends(get_balance_service)) -> PointsGate:
    return PointsGate(balance)


def get_cost_schedule() -> PointCostSchedule:
    return PointCostSchedule.from_settings(settings)


def get_page_sizes() -> dict[ContentType, int]:
    return {
        ContentType.PLACE: settings.history_page_size_place,
        ContentType.BLOG: settings.history_page_size_blog,
        ContentType.SHOPPING: settings.history_page_size_shopping,
    }


def get_rank_resolver() -> RankResolver:
    return RankResolver(max_depth=settings.max_rank_depth)


# ---- Candidate sources -----------------------------------------------------

def get_source_provider(
    session: BrowserSession = Depends(get_browser_session),
    client: NaverSearchClient = Depends(get_search_client),
) -> CandidateSourceProvider:
    browser_source = rendered_page_source.RenderedPageSource(
        session,
        rendered_page_source.limits_from_settings(settings),
        navigation_timeout_ms=settings.browser_navigation_timeout_ms,
        locator=client.locate if client.configured else None,
    )
    api_source = search_api_source.SearchApiSource(
        client,
        search_api_source.limits_from_settings(settings),
        page_size=settings.api_page_size,
    )
    return NaverCandidateSourceProvider(
        sources={SourceStrategy.BROWSER: browser_source, SourceStrategy.API: api_source},
        defaults={
            ContentType.PLACE: settings.place_source_strategy,
            ContentType.BLOG: settings.blog_source_strategy,
            ContentType.SHOPPING: settings.shopping_source_strategy,
        },
    )


def get_keyword_insights(
    client: NaverSearchClient = Depends(get_search_client),
) -> KeywordInsightsProvider:
    return NaverKeywordInsightsProvider(client)


def get_main_keyword_source(
    session: BrowserSession = Depends(get_browser_session),
) -> MainKeywordSource:
    return PlaceMainKeywordSource(session, settings.browser_navigation_timeout_ms)


# ---- Use-case dependencies -------------------------------------------------

def get_check_rank_use_case(
    resolver: RankResolver = Depends(get_rank_resolver),
    sources: CandidateSourceProvider = Depends(get_source_provider),
    points: PointsGate = Depends(get_points_gate),
    history: RankHistoryStore = Depends(get_history_store),
    costs: PointCostSchedule = Depends(get_cost_schedule),
    page_sizes: dict[ContentType, int] = Depends(get_page_sizes),
) -> CheckRank:
    return CheckRank(resolver, sources, points, history, costs, page_sizes)


def get_compare_ranks_use_case(
    resolver: RankResolver = Depends(get_rank_resolver),
    sources: CandidateSourceProvider = Depends(get_source_provider),
    points: PointsGate = Depends(get_points_gate),
    costs: PointCostSchedule = Depends(get_cost_schedule),
) -> CompareRanks:
    batch_resolver = BatchRankResolver(resolver, concurrency=settings.batch_concurrency)
    return CompareRanks(batch_resolver, sources, points, costs)


def get_extract_main_keywords_use_case(
    source: MainKeywordSource = Depends(get_main_keyword_source),
    points: PointsGate = Depends(get_points_gate),
    costs: PointCostSchedule = Depends(get_cost_schedule),
) -> ExtractMainKeywords:
    return ExtractMainKeywords(source, points, costs)


def get_keyword_volume_use_case(
    insights: KeywordInsightsProvider = Depends(get_keyword_insights),
    points: PointsGate = Depends(get_points_gate),
    costs: PointCostSchedule = Depends(get_cost_schedule),
) -> GetKeywordVolume:
    return GetKeywordVolume(insights, points, costs)


def get_keyword_trend_use_case(
    insights: KeywordInsightsProvider = Depends(get_keyword_insights),
    points: PointsGate = Depends(get_points_gate),
    costs: PointCostSchedule = Depends(get_cost_schedule),
) -> GetKeywordTrend:
    return GetKeywordTrend(insights, points, costs)


def get_rank_history_use_case(
    history: RankHistoryStore = Depends(get_history_store),
) -> GetRankHistory:
    return GetRankHistory(history)
