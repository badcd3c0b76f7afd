"""Class and session administration: CRUD with referential-integrity guards."""

import uuid
from datetime import date
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.classes_service.errors import (
    IntegrityViolationError,
    NotFoundError,
    store_errors,
)
from services.classes_service.models import (
    Attendance,
    Class,
    ClassSession,
    Enrollment,
    EnrollmentStatus,
    Profile,
    ProfileRole,
    Program,
    SessionStatus,
)
from services.classes_service.schemas import (
    BulkDeleteResult,
    ClassCreate,
    ClassDetailResponse,
    ClassUpdate,
    ScheduleResponse,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)
from services.classes_service.services.next_session import get_next_session
from services.classes_service.services.schedule_service import get_schedules
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

RECENT_SESSIONS_LIMIT = 5


# ---------------------------------------------------------------------------
# Instructors
# ---------------------------------------------------------------------------


async def get_instructors(db: AsyncSession) -> list[Profile]:
    with store_errors("fetch instructors"):
        result = await db.execute(
            select(Profile)
            .where(Profile.role == ProfileRole.INSTRUCTOR)
            .order_by(Profile.first_name)
        )
        return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


async def create_class(db: AsyncSession, class_in: ClassCreate) -> Class:
    class_ = Class(**class_in.model_dump())
    with store_errors("create class"):
        db.add(class_)
        await db.commit()
        await db.refresh(class_)
    logger.info("Created class %s (%s)", class_.id, class_.name)
    return class_


async def get_class(db: AsyncSession, class_id: uuid.UUID) -> Optional[Class]:
    with store_errors("fetch class"):
        result = await db.execute(select(Class).where(Class.id == class_id))
        return result.scalar_one_or_none()


async def update_class(
    db: AsyncSession, class_id: uuid.UUID, class_in: ClassUpdate
) -> Class:
    class_ = await get_class(db, class_id)
    if class_ is None:
        raise NotFoundError(f"Class {class_id} not found")

    for field, value in class_in.model_dump(exclude_unset=True).items():
        setattr(class_, field, value)

    with store_errors("update class"):
        await db.commit()
        await db.refresh(class_)
    return class_


async def get_classes(
    db: AsyncSession,
    program_id: Optional[uuid.UUID] = None,
    instructor_id: Optional[uuid.UUID] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
) -> list[Class]:
    query = select(Class)
    if program_id:
        query = query.where(Class.program_id == program_id)
    if instructor_id:
        query = query.where(Class.instructor_id == instructor_id)
    if is_active is not None:
        query = query.where(Class.is_active.is_(is_active))
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(Class.name.ilike(pattern), Class.description.ilike(pattern))
        )
    query = query.order_by(Class.created_at.desc())

    with store_errors("fetch classes"):
        result = await db.execute(query)
        return list(result.scalars().all())


async def count_active_enrollments(db: AsyncSession, class_id: uuid.UUID) -> int:
    with store_errors("check for active enrollments"):
        result = await db.execute(
            select(func.count(Enrollment.id)).where(
                Enrollment.class_id == class_id,
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
        )
        return result.scalar_one()


async def get_class_by_id(
    db: AsyncSession, class_id: uuid.UUID
) -> Optional[ClassDetailResponse]:
    """Class with enrollment count, next session and most recent sessions."""
    with store_errors("fetch class"):
        result = await db.execute(
            select(Class, Program.name)
            .outerjoin(Program, Program.id == Class.program_id)
            .where(Class.id == class_id)
        )
        row = result.first()
    if row is None:
        return None
    class_, program_name = row

    enrollment_count = await count_active_enrollments(db, class_id)
    with store_errors("fetch recent sessions"):
        result = await db.execute(
            select(ClassSession)
            .where(ClassSession.class_id == class_id)
            .order_by(ClassSession.session_date.desc())
            .limit(RECENT_SESSIONS_LIMIT)
        )
        recent_sessions = result.scalars().all()
    schedules = await get_schedules(db, class_id)
    next_session = await get_next_session(db, class_id)

    return ClassDetailResponse(
        id=class_.id,
        program_id=class_.program_id,
        name=class_.name,
        description=class_.description,
        max_capacity=class_.max_capacity,
        instructor_id=class_.instructor_id,
        is_active=class_.is_active,
        created_at=class_.created_at,
        updated_at=class_.updated_at,
        program_name=program_name,
        enrollment_count=enrollment_count,
        next_session=next_session,
        recent_sessions=[SessionResponse.model_validate(s) for s in recent_sessions],
        schedules=[ScheduleResponse.model_validate(s) for s in schedules],
    )


async def delete_class(db: AsyncSession, class_id: uuid.UUID) -> None:
    """Soft delete; refused while any student is actively enrolled."""
    if await count_active_enrollments(db, class_id) > 0:
        raise IntegrityViolationError(
            "Cannot delete class with active enrollments. Please drop all students first."
        )

    class_ = await get_class(db, class_id)
    if class_ is None:
        raise NotFoundError(f"Class {class_id} not found")

    class_.is_active = False
    with store_errors("delete class"):
        await db.commit()
    logger.info("Deactivated class %s", class_id)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


async def create_session(db: AsyncSession, session_in: SessionCreate) -> ClassSession:
    session = ClassSession(**session_in.model_dump(), status=SessionStatus.SCHEDULED)
    with store_errors("create session"):
        db.add(session)
        await db.commit()
        await db.refresh(session)
    return session


async def get_session(db: AsyncSession, session_id: uuid.UUID) -> Optional[ClassSession]:
    with store_errors("fetch session"):
        result = await db.execute(
            select(ClassSession).where(ClassSession.id == session_id)
        )
        return result.scalar_one_or_none()


async def update_session(
    db: AsyncSession, session_id: uuid.UUID, session_in: SessionUpdate
) -> ClassSession:
    session = await get_session(db, session_id)
    if session is None:
        raise NotFoundError(f"Session {session_id} not found")

    for field, value in session_in.model_dump(exclude_unset=True).items():
        setattr(session, field, value)

    with store_errors("update session"):
        await db.commit()
        await db.refresh(session)
    return session


async def get_sessions(
    db: AsyncSession,
    class_id: Optional[uuid.UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status: Optional[SessionStatus] = None,
) -> list[ClassSession]:
    query = select(ClassSession)
    if class_id:
        query = query.where(ClassSession.class_id == class_id)
    if date_from:
        query = query.where(ClassSession.session_date >= date_from)
    if date_to:
        query = query.where(ClassSession.session_date <= date_to)
    if status:
        query = query.where(ClassSession.status == status)
    query = query.order_by(ClassSession.session_date, ClassSession.start_time)

    with store_errors("fetch sessions"):
        result = await db.execute(query)
        return list(result.scalars().all())


async def delete_session(db: AsyncSession, session_id: uuid.UUID) -> None:
    """Hard delete; refused once attendance has been recorded against the session."""
    with store_errors("check attendance"):
        result = await db.execute(
            select(func.count(Attendance.id)).where(
                Attendance.class_session_id == session_id
            )
        )
        attendance_count = result.scalar_one()

    if attendance_count > 0:
        raise IntegrityViolationError(
            "Cannot delete session with attendance records. Please remove attendance first."
        )

    with store_errors("delete session"):
        await db.execute(delete(ClassSession).where(ClassSession.id == session_id))
        await db.commit()


async def bulk_delete_sessions(
    db: AsyncSession,
    date_from: date,
    date_to: date,
    class_id: Optional[uuid.UUID] = None,
    status: Optional[SessionStatus] = None,
    batch_size: Optional[int] = None,
) -> BulkDeleteResult:
    """Delete sessions in a date range, skipping any with attendance.

    Deletes run in batches that commit independently; a failed batch is
    reported in ``errors`` and the remaining batches still run.
    """
    batch_size = batch_size or get_settings().SESSION_DELETE_BATCH_SIZE

    query = select(ClassSession.id).where(
        ClassSession.session_date >= date_from,
        ClassSession.session_date <= date_to,
    )
    if class_id:
        query = query.where(ClassSession.class_id == class_id)
    if status:
        query = query.where(ClassSession.status == status)

    with store_errors("fetch sessions for bulk delete"):
        result = await db.execute(query)
        session_ids = list(result.scalars().all())

    if not session_ids:
        return BulkDeleteResult()

    with store_errors("check attendance records"):
        result = await db.execute(
            select(Attendance.class_session_id)
            .where(Attendance.class_session_id.in_(session_ids))
            .distinct()
        )
        with_attendance = set(result.scalars().all())

    to_delete = [sid for sid in session_ids if sid not in with_attendance]
    skipped_count = len(session_ids) - len(to_delete)

    deleted_count = 0
    errors: list[str] = []
    for start in range(0, len(to_delete), batch_size):
        batch = to_delete[start : start + batch_size]
        batch_number = start // batch_size + 1
        try:
            await db.execute(delete(ClassSession).where(ClassSession.id.in_(batch)))
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.warning("Bulk delete batch %d failed: %s", batch_number, exc)
            errors.append(f"Failed to delete batch {batch_number}: {exc}")
        else:
            deleted_count += len(batch)

    logger.info(
        "Bulk deleted %d sessions between %s and %s (%d skipped, %d failed batches)",
        deleted_count,
        date_from,
        date_to,
        skipped_count,
        len(errors),
    )
    return BulkDeleteResult(
        deleted_count=deleted_count, skipped_count=skipped_count, errors=errors
    )
