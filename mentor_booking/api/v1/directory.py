"""Mentor and student registry endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from mentor_booking.api.deps import Administration, Directory, http_error
from mentor_booking.booking.errors import BookingError
from mentor_booking.schemas.directory import (
    MentorCreate,
    MentorRead,
    StudentCreate,
    StudentRead,
)
from mentor_booking.schemas.ledger import DeletionSummaryResponse

mentors_router = APIRouter()
students_router = APIRouter()


# ============================================================================
# Mentors
# ============================================================================


@mentors_router.post(
    "",
    response_model=MentorRead,
    status_code=status.HTTP_201_CREATED,
)
async def register_mentor(request: MentorCreate, directory: Directory) -> MentorRead:
    """Register a mentor with their expertise tags."""
    try:
        mentor = await directory.create_mentor(
            name=request.name,
            expertise=request.expertise,
            premium=request.premium,
        )
    except BookingError as e:
        raise http_error(e)
    return MentorRead.model_validate(mentor)


@mentors_router.get("", response_model=list[MentorRead])
async def list_mentors(directory: Directory) -> list[MentorRead]:
    """List all mentors."""
    try:
        mentors = await directory.list_mentors()
    except BookingError as e:
        raise http_error(e)
    return [MentorRead.model_validate(m) for m in mentors]


@mentors_router.get("/{mentor_id}", response_model=MentorRead)
async def get_mentor(mentor_id: str, directory: Directory) -> MentorRead:
    """Get a single mentor."""
    try:
        mentor = await directory.get_mentor(mentor_id)
    except BookingError as e:
        raise http_error(e)

    if not mentor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Mentor not found",
        )
    return MentorRead.model_validate(mentor)


@mentors_router.delete("/{mentor_id}", response_model=DeletionSummaryResponse)
async def delete_mentor(
    mentor_id: str,
    admin: Administration,
    cascade: bool = Query(False, description="Also delete the mentor's appointments and payments"),
) -> DeletionSummaryResponse:
    """Delete a mentor. Refused while ledger rows reference them unless cascading."""
    try:
        summary = await admin.delete_mentor(mentor_id, cascade=cascade)
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)


@mentors_router.delete("", response_model=DeletionSummaryResponse)
async def delete_all_mentors(
    admin: Administration,
    cascade: bool = Query(False),
) -> DeletionSummaryResponse:
    """Delete all mentors."""
    try:
        summary = await admin.delete_all_mentors(cascade=cascade)
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)


# ============================================================================
# Students
# ============================================================================


@students_router.post(
    "",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
)
async def register_student(request: StudentCreate, directory: Directory) -> StudentRead:
    """Register a student with their area of interest."""
    try:
        student = await directory.create_student(
            name=request.name,
            area_of_interest=request.area_of_interest,
        )
    except BookingError as e:
        raise http_error(e)
    return StudentRead.model_validate(student)


@students_router.get("", response_model=list[StudentRead])
async def list_students(directory: Directory) -> list[StudentRead]:
    """List all students."""
    students = await directory.list_students()
    return [StudentRead.model_validate(s) for s in students]


@students_router.get("/{student_id}", response_model=StudentRead)
async def get_student(student_id: str, directory: Directory) -> StudentRead:
    """Get a single student."""
    student = await directory.get_student(student_id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return StudentRead.model_validate(student)


@students_router.delete("/{student_id}", response_model=DeletionSummaryResponse)
async def delete_student(
    student_id: str,
    admin: Administration,
    cascade: bool = Query(False, description="Also delete the student's appointments and payments"),
) -> DeletionSummaryResponse:
    """Delete a student. Refused while ledger rows reference them unless cascading."""
    try:
        summary = await admin.delete_student(student_id, cascade=cascade)
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)


@students_router.delete("", response_model=DeletionSummaryResponse)
async def delete_all_students(
    admin: Administration,
    cascade: bool = Query(False),
) -> DeletionSummaryResponse:
    """Delete all students."""
    try:
        summary = await admin.delete_all_students(cascade=cascade)
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)
