from fastapi import FastAPI

from tiktok_scraper_pkg import scraper_logging
from tiktok_scraper_pkg.models import ScrapeApiRequest
from scraper import scrape_profile

scraper_logging.configure_logging()

app = FastAPI(title="TikTok Profile Scraper")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/scrape/tiktok")
async def scrape_tiktok(data: ScrapeApiRequest):
    # Failures come back in the body (`error`, `error_kind`), not as HTTP errors.
    return await scrape_profile(data.to_request())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=False)
