from unittest.mock import patch

from naver_rank import run
from naver_rank.config import settings


class TestMain:
    def test_serves_the_app_on_configured_address(self) -> None:
        with patch.object(settings, "host", "127.0.0.1"), patch.object(
            settings, "port", 9100
        ), patch.object(settings, "log_level", "DEBUG"), patch(
            "naver_rank.run.uvicorn.run"
        ) as serve:
            run.main()

        serve.assert_called_once_with(
            "naver_rank.api.main:app",
            host="127.0.0.1",
            port=9100,
            log_level="debug",
        )
