import logging
from uuid import UUID
from fastapi import APIRouter, status
from sqlalchemy.exc import IntegrityError

from core.auth import verify_password_async, create_access_token
from core.depends import AsyncDBSession, CurrentVoter
from core.exceptions import AuthError, InternalError, NotFoundError, ValidationError, VotingError
from schemas.voter_schema import (
    VoterRegisterSchema,
    VoterLoginSchema,
    VoterResponse,
    LoginResponse,
    MessageResponse,
)
from crud.voter_crud import voter_crud as VoterCrud
from crud.vote_crud import vote_crud as VoteCrud

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/voters",
    tags=["voters"]
)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_voter(
    session: AsyncDBSession,
    voter_data: VoterRegisterSchema
):
    try:
        async with session.begin():
            existing_voter = await VoterCrud.get_voter_by_email(session, voter_data.email)
            if existing_voter:
                raise ValidationError("Email already exists, please use a different email")

            voter = await VoterCrud.create_voter(session, {
                "full_name": voter_data.full_name,
                "email": voter_data.email,
                "password": voter_data.password,
            })

        logger.info(f"Registered voter {voter.id} (admin={voter.is_admin})")
        return MessageResponse(message=f"New voter {voter.full_name} registered successfully!")

    except VotingError:
        raise
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        await session.rollback()
        raise ValidationError("Email already exists, please use a different email")
    except Exception as e:
        await session.rollback()
        logger.exception("Registration failed")
        raise InternalError(f"Registration failed: {str(e)}")


@router.post("/login", response_model=LoginResponse)
async def login_voter(
    session: AsyncDBSession,
    credentials: VoterLoginSchema
):
    """Authenticate a voter and issue a one-day access token."""
    try:
        async with session.begin():
            voter = await VoterCrud.get_voter_by_email(session, credentials.email)
            if not voter:
                raise AuthError("Invalid credentials.")
            if not await verify_password_async(credentials.password, voter.hashed_password):
                raise AuthError("Invalid credentials.")

            voted_elections = await VoteCrud.get_voted_election_ids(session, voter.id)

        access_token = create_access_token(
            data={"sub": str(voter.id), "is_admin": voter.is_admin}
        )

        return LoginResponse(
            token=access_token,
            id=voter.id,
            voted_elections=voted_elections,
            is_admin=voter.is_admin
        )

    except VotingError:
        raise
    except Exception as e:
        await session.rollback()
        logger.exception("Login failed")
        raise InternalError(f"Login failed: {str(e)}")


@router.get("/{voter_id}", response_model=VoterResponse)
async def get_voter(
    session: AsyncDBSession,
    voter_id: str,
    current_voter: CurrentVoter
):
    # any lookup failure, malformed ids included, reads as not found
    try:
        voter_uuid = UUID(voter_id)
    except ValueError:
        raise NotFoundError("Voter not found") from None

    try:
        async with session.begin():
            voter = await VoterCrud.get_voter_by_id(session, voter_uuid)
            if not voter:
                raise NotFoundError("Voter not found")
            voted_elections = await VoteCrud.get_voted_election_ids(session, voter.id)

        return VoterResponse(
            id=voter.id,
            full_name=voter.full_name,
            email=voter.email,
            is_admin=voter.is_admin,
            voted_elections=voted_elections,
            created_at=voter.created_at
        )

    except VotingError:
        raise
    except Exception as e:
        logger.exception("Failed to fetch voter")
        raise InternalError(f"Failed to retrieve voter: {str(e)}")
