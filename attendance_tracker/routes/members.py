"""Member routes for registering and listing members."""
from fastapi import APIRouter, Depends, Form
from sqlmodel import Session

from attendance_tracker.core.database import get_session
from attendance_tracker.models import Member
from attendance_tracker.services.directory import add_member, get_member, list_members

router = APIRouter(prefix="/members", tags=["members"])


@router.post("", status_code=201, response_model=Member)
async def create_member(
    full_name: str = Form(""),
    phone_number: str = Form(""),
    email: str = Form(""),
    session: Session = Depends(get_session),
):
    """
    Register a new member.

    Only the full name is required; returns 400 when it is blank.
    """
    return add_member(session, full_name, phone_number, email)


@router.get("", response_model=list[Member])
async def members(initial: str | None = None, session: Session = Depends(get_session)):
    """
    List members alphabetically by full name.

    The optional ``initial`` query parameter limits the list to names that
    start with that letter, matching the letter picker on the attendance
    screen.
    """
    return list_members(session, initial)


@router.get("/{member_id}", response_model=Member)
async def member_detail(member_id: str, session: Session = Depends(get_session)):
    """Fetch one member, 404 if unknown."""
    return get_member(session, member_id)
