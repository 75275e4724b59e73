from sqlalchemy.orm import Session
import logging

from ..core.errors import NotFoundError
from ..models.patient import Patient
from ..schemas.patient import PatientCreate
from .mrn_service import MrnService

logger = logging.getLogger(__name__)

class PatientService:
    def __init__(self, db: Session):
        self.db = db

    def register_patient(self, patient_data: PatientCreate) -> Patient:
        """Register a patient under a freshly generated medical record number."""
        mrn = MrnService(self.db).generate_unique_mrn()

        patient = Patient(medical_record_number=mrn, **patient_data.model_dump())

        self.db.add(patient)
        self.db.commit()
        self.db.refresh(patient)

        logger.info(f"Registered patient {patient.id} as {mrn}")
        return patient

    def get_patient(self, patient_id: int) -> Patient:
        patient = self.db.query(Patient).filter(Patient.id == patient_id).first()
        if not patient:
            raise NotFoundError("Patient not found")
        return patient

    def get_patient_by_mrn(self, mrn: str) -> Patient:
        patient = self.db.query(Patient).filter(
            Patient.medical_record_number == mrn
        ).first()
        if not patient:
            raise NotFoundError("Patient not found")
        return patient
