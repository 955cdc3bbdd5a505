from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from tuition.config import settings
from tuition.db import Base, engine
from tuition.route_logging import EndpointNameRoute
from tuition.routers import ai_help, attendance, dashboard, fees, remarks, students

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(bind=engine)
    logging.getLogger(__name__).info('startup app=%s env=%s', settings.app_name, settings.app_env)
    yield
    engine.dispose()


app = FastAPI(title=settings.app_name, version='0.1.0', lifespan=lifespan)
app.router.route_class = EndpointNameRoute

app.include_router(dashboard.router)
app.include_router(students.router)
app.include_router(attendance.router)
app.include_router(fees.router)
app.include_router(remarks.router)
app.include_router(ai_help.router)


@app.get('/')
def health():
    return {'app': settings.app_name, 'status': 'ok'}


@app.get('/health')
def healthcheck():
    return {'status': 'ok'}
