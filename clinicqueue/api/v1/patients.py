from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...services.patient_service import PatientService
from ...schemas.patient import PatientCreate, PatientResponse

router = APIRouter(prefix="/patients", tags=["Patients"])

@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient_data: PatientCreate,
    db: Session = Depends(get_db)
):
    """Register a patient and assign a medical record number."""
    patient = PatientService(db).register_patient(patient_data)
    return PatientResponse.model_validate(patient)

@router.get("/by-mrn/{mrn}", response_model=PatientResponse)
async def get_patient_by_mrn(
    mrn: str,
    db: Session = Depends(get_db)
):
    return PatientResponse.model_validate(PatientService(db).get_patient_by_mrn(mrn))

@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    db: Session = Depends(get_db)
):
    return PatientResponse.model_validate(PatientService(db).get_patient(patient_id))
