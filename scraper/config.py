from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class ScraperSettings:
    base_url: str = os.getenv("SCRAPER_BASE_URL", "http://www.ufcstats.com")
    user_agent: str = os.getenv(
        "SCRAPER_USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    )
    bio_user_agent: str = os.getenv("SCRAPER_BIO_USER_AGENT", "MMA-App/1.0 (educational-use)")
    wikipedia_base_url: str = os.getenv("WIKIPEDIA_BASE_URL", "https://en.wikipedia.org")
    delay_seconds: float = float(os.getenv("SCRAPER_DELAY_SECONDS", "1.5"))
    timeout_seconds: float = float(os.getenv("SCRAPER_TIMEOUT_SECONDS", "10"))
    output_dir: str = os.getenv("SCRAPER_OUTPUT_DIR", "data")

    @property
    def fighters_url(self) -> str:
        return f"{self.base_url}/statistics/fighters"

    @property
    def wikipedia_summary_url(self) -> str:
        return f"{self.wikipedia_base_url}/api/rest_v1/page/summary"

    @property
    def wikipedia_api_url(self) -> str:
        return f"{self.wikipedia_base_url}/w/api.php"


settings = ScraperSettings()
