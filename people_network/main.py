import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, graph, schemas
from .config import settings
from .db import engine, get_db, init_db
from .errors import ConflictError, NotFoundError, ValidationFailed
from .logging_setup import configure_logging
from .plotly_graph.plotly_render import build_network_figure, export_figure
from .seed import seed as run_seed

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db(engine)
    yield


app = FastAPI(title="People Network", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error mapping ──

@app.exception_handler(NotFoundError)
async def not_found_handler(_request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(_request: Request, exc: ValidationFailed):
    return JSONResponse(status_code=400, content={"detail": exc.errors})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": crud.error_list(exc.errors())})


@app.exception_handler(ConflictError)
async def conflict_handler(_request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Store unavailable"})


# ── People ──

@app.get("/people", response_model=list[schemas.PersonOut])
def people(q: str | None = None, group: str | None = None, db: Session = Depends(get_db)):
    return crud.list_people(db, q=q, group=group)


@app.get("/people/{person_id}", response_model=schemas.PersonOut)
def get_person(person_id: int, db: Session = Depends(get_db)):
    return crud.get_person(db, person_id)


@app.post("/people", response_model=schemas.PersonOut, status_code=201)
def add_person(body: schemas.PersonCreate, db: Session = Depends(get_db)):
    return crud.create_person(db, **body.model_dump())


@app.put("/people/{person_id}", response_model=schemas.PersonOut)
def update_person(person_id: int, body: schemas.PersonUpdate, db: Session = Depends(get_db)):
    return crud.update_person(db, person_id, **body.model_dump(exclude_unset=True))


@app.delete("/people/{person_id}", status_code=204)
def delete_person(person_id: int, db: Session = Depends(get_db)):
    crud.delete_person(db, person_id)
    return Response(status_code=204)


@app.get("/people/{person_id}/relationships", response_model=list[schemas.RelationshipOut])
def person_relationships(person_id: int, db: Session = Depends(get_db)):
    return crud.list_person_relationships(db, person_id)


# ── Relationships ──

@app.get("/relationships", response_model=list[schemas.RelationshipOut])
def relationships(db: Session = Depends(get_db)):
    return crud.list_relationships(db)


@app.get("/relationships/{rel_id}", response_model=schemas.RelationshipOut)
def get_relationship(rel_id: int, db: Session = Depends(get_db)):
    return crud.get_relationship(db, rel_id)


@app.post("/relationships", response_model=schemas.RelationshipOut, status_code=201)
def add_rel(body: schemas.RelCreate, db: Session = Depends(get_db)):
    return crud.create_relationship(db, body.person_id, body.related_person_id, body.relationship_type)


@app.delete("/relationships/{rel_id}", status_code=204)
def delete_rel(rel_id: int, db: Session = Depends(get_db)):
    crud.delete_relationship(db, rel_id)
    return Response(status_code=204)


# ── Graph ──

@app.get("/network/{person_id}", response_model=schemas.NetworkOut, response_model_exclude_none=True)
def network(person_id: int, db: Session = Depends(get_db)):
    return graph.build_network(db, person_id)


@app.get("/network/{person_id}/export")
def export_network(person_id: int, fmt: str = Query("html", alias="format"), db: Session = Depends(get_db)):
    fig = build_network_figure(graph.build_network(db, person_id))
    payload, media_type = export_figure(fig, fmt)
    filename = f"network-{person_id}.{fmt.lower()}"
    return Response(
        content=payload,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/graph", response_model=schemas.NetworkOut, response_model_exclude_none=True)
def get_graph(db: Session = Depends(get_db)):
    return graph.build_graph(db)


# ── Utilities ──

@app.post("/seed", response_model=schemas.SeedOut)
def seed(clear: bool = False, db: Session = Depends(get_db)):
    return {"ok": True, "ids": run_seed(db, clear=clear)}


@app.get("/health")
def health():
    return {"ok": True}
