"""
Catalog Routes (read-only reference data)

GET /courses - Active courses, filter by institution / faculty
GET /courses/{course_id} - Course details
GET /institutions - All institutions
GET /institutions/{institution_id} - Institution details
GET /jobs - Active job postings, newest first
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from admissions_portal.models import Course, Institution
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import CourseListResponse, InstitutionListResponse, JobListResponse

router = APIRouter(tags=["Catalog"])


@router.get("/courses", response_model=CourseListResponse)
def list_courses(
    institution_id: Optional[str] = Query(None),
    faculty: Optional[str] = Query(None, description="Filter by faculty name"),
    services: PortalServices = Depends(get_services),
):
    """List active courses with filters."""
    courses = services.catalog.list_courses(institution_id=institution_id, faculty=faculty)
    return CourseListResponse(courses=courses, faculties=services.catalog.list_faculties(), total=len(courses))


@router.get("/courses/{course_id}", response_model=Course)
def get_course(course_id: str, services: PortalServices = Depends(get_services)):
    return services.catalog.get_course(course_id)


@router.get("/institutions", response_model=InstitutionListResponse)
def list_institutions(services: PortalServices = Depends(get_services)):
    return InstitutionListResponse(institutions=services.catalog.list_institutions())


@router.get("/institutions/{institution_id}", response_model=Institution)
def get_institution(institution_id: str, services: PortalServices = Depends(get_services)):
    return services.catalog.get_institution(institution_id)


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(services: PortalServices = Depends(get_services)):
    """Active job postings; total is the "Available Jobs" figure."""
    jobs = services.catalog.list_jobs()
    return JobListResponse(jobs=jobs, total=len(jobs))
