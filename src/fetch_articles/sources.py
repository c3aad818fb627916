NEWS_SOURCES = {
    "newsapi": "https://newsapi.org/v2/everything",
    "gnews": "https://gnews.io/api/v4/search",
}

REQUEST_TIMEOUT_SECONDS = 30
USER_AGENT = "news-tagger/1.0"
