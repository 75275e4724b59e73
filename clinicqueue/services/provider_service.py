from sqlalchemy.orm import Session
from typing import List
import logging

from ..core.errors import NotFoundError, ConflictError
from ..models.provider import Provider
from ..schemas.provider import ProviderCreate

logger = logging.getLogger(__name__)

class ProviderService:
    def __init__(self, db: Session):
        self.db = db

    def create_provider(self, provider_data: ProviderCreate) -> Provider:
        """Register a new provider."""
        existing = self.db.query(Provider).filter(
            Provider.license_number == provider_data.license_number
        ).first()

        if existing:
            raise ConflictError("License number already registered")

        provider = Provider(**provider_data.model_dump(), is_active=True)

        self.db.add(provider)
        self.db.commit()
        self.db.refresh(provider)

        logger.info(f"Registered provider {provider.id} ({provider.provider_type.value})")
        return provider

    def get_provider(self, provider_id: int) -> Provider:
        provider = self.db.query(Provider).filter(Provider.id == provider_id).first()
        if not provider:
            raise NotFoundError("Provider not found")
        return provider

    def list_providers(self, skip: int = 0, limit: int = 50) -> List[Provider]:
        """List active providers."""
        return self.db.query(Provider).filter(
            Provider.is_active == True
        ).order_by(Provider.id).offset(skip).limit(limit).all()
