# /videolib/api/dependencies.py

from fastapi import Request

from videolib.config import APIConfig
from videolib.services.catalog import CatalogService
from videolib.services.ingestion import IngestionService


def get_config(request: Request) -> APIConfig:
    return request.app.state.cfg

def get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion

def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog
