# Create a main router that includes all the individual routers
from prompty.metrics.router import MetricsRouter

from .pages import router as pages_router
from .prompts import router as prompts_router

api_router = MetricsRouter()
api_router.include_router(prompts_router)

page_router = MetricsRouter()
page_router.include_router(pages_router)
