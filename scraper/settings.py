BOT_NAME = "mma_fighter_data"

SPIDER_MODULES = ["scraper.spiders"]
NEWSPIDER_MODULE = "scraper.spiders"

ROBOTSTXT_OBEY = True
DOWNLOAD_DELAY = 1.5
CONCURRENT_REQUESTS = 1
USER_AGENT = "MMA-Fighter-Data/0.1"

ITEM_PIPELINES = {
    "scraper.pipelines.validation.ValidationPipeline": 100,
    "scraper.pipelines.storage.StoragePipeline": 200,
}

LOG_LEVEL = "INFO"

# Listing pages change rarely; cache them for a day between crawls
HTTPCACHE_ENABLED = True
HTTPCACHE_DIR = "data/cache/scrapy_cache"
HTTPCACHE_EXPIRATION_SECS = 86400
HTTPCACHE_IGNORE_HTTP_CODES = [500, 502, 503, 504]

DNS_TIMEOUT = 10
