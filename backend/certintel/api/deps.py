from functools import lru_cache

from fastapi import Depends

from certintel.core.config import settings
from certintel.repos.class_catalog.read import ClassCatalogLookup, InMemoryClassCatalogReadRepo
from certintel.repos.directory.read import DirectoryLookup, InMemoryDirectoryReadRepo
from certintel.services.certificate_service import CertificateService


@lru_cache(maxsize=1)
def get_directory() -> DirectoryLookup:
    """
    Provides the user directory.
    Seeded from DIRECTORY_SEED_PATH in dev; empty otherwise. Override with
    app.dependency_overrides to plug in the portal's real store (or a fake in tests).
    """
    if settings.DIRECTORY_SEED_PATH:
        return InMemoryDirectoryReadRepo.from_json_file(settings.DIRECTORY_SEED_PATH)
    return InMemoryDirectoryReadRepo()


@lru_cache(maxsize=1)
def get_catalog() -> ClassCatalogLookup:
    """Provides the training-class catalog (same seeding rules as the directory)."""
    if settings.CLASS_CATALOG_SEED_PATH:
        return InMemoryClassCatalogReadRepo.from_json_file(settings.CLASS_CATALOG_SEED_PATH)
    return InMemoryClassCatalogReadRepo()


def get_certificate_service(
    directory: DirectoryLookup = Depends(get_directory),
    catalog: ClassCatalogLookup = Depends(get_catalog),
) -> CertificateService:
    """
    Service dependency for certificate flows.
    Injects both collaborator lookups.
    """
    return CertificateService(directory=directory, catalog=catalog)
