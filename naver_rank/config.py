from pydantic_settings import BaseSettings, SettingsConfigDict

from naver_rank.domain.enums.content_type import SourceStrategy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    service_name: str = "naver-rank-service"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Postgres holding point balances and rank history. Unset = both disabled (permissive no-ops)
    database_url: str | None = None

    # Naver Open API (search + DataLab)
    naver_client_id: str | None = None
    naver_client_secret: str | None = None
    naver_api_base_url: str = "https://openapi.naver.com"
    naver_api_timeout: float = 10.0

    # Headless browser
    browser_headless: bool = True
    browser_executable_path: str | None = None
    browser_navigation_timeout_ms: int = 30000

    # Rank resolution
    max_rank_depth: int = 300
    batch_concurrency: int = 1
    place_source_strategy: SourceStrategy = SourceStrategy.BROWSER
    blog_source_strategy: SourceStrategy = SourceStrategy.BROWSER
    shopping_source_strategy: SourceStrategy = SourceStrategy.BROWSER

    # Rendered-page strategy: safety valves, empty-increment limits and throttles
    place_max_scrolls: int = 100
    place_max_empty_scrolls: int = 10
    place_scroll_delay: float = 2.0
    blog_max_pages: int = 30
    blog_max_empty_pages: int = 3
    blog_page_delay: float = 0.5
    shopping_max_scrolls: int = 30
    shopping_max_empty_scrolls: int = 5
    shopping_scroll_delay: float = 1.5

    # Search-API strategy
    api_page_size: int = 100
    api_max_pages: int = 10
    api_max_empty_pages: int = 2
    api_page_delay: float = 0.1

    # Fee schedule (points)
    cost_place_check: int = 100
    cost_place_check_cheap: int = 50
    cost_blog_check: int = 80
    cost_shopping_check: int = 100
    cost_shopping_check_cheap: int = 50
    cost_keyword_volume: int = 30
    cost_main_keyword_extract: int = 50

    # Results per page on each surface, used to derive the page number stored in history
    history_page_size_place: int = 10
    history_page_size_blog: int = 10
    history_page_size_shopping: int = 40


settings = Settings()
