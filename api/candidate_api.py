import logging
from typing import Annotated, List, Optional
from uuid import UUID
from fastapi import APIRouter, File, Form, UploadFile, status

from core.depends import AsyncDBSession, AssetStorageDep, AdminVoter, CurrentVoter
from core.exceptions import (
    AlreadyVotedError,
    AuthError,
    InternalError,
    NotFoundError,
    ValidationError,
    VotingError,
)
from core.settings import settings
from core.storage import validate_image
from schemas.base_schema import validate_form
from schemas.candidate_schema import (
    CandidateFormSchema,
    CandidateResponse,
    CandidateCreatedResponse,
    VoteRequestSchema,
)
from schemas.voter_schema import MessageResponse
from crud.candidate_crud import candidate_crud as CandidateCrud
from crud.election_crud import election_crud as ElectionCrud
from crud.voter_crud import voter_crud as VoterCrud
from crud.vote_crud import vote_crud as VoteCrud

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/candidates",
    tags=["candidates"]
)


@router.post("", response_model=CandidateCreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_candidate(
    session: AsyncDBSession,
    storage: AssetStorageDep,
    current_admin: AdminVoter,
    full_name: Annotated[Optional[str], Form(alias="fullName")] = None,
    motto: Annotated[Optional[str], Form()] = None,
    current_election: Annotated[Optional[str], Form(alias="currentElection")] = None,
    image: Annotated[Optional[UploadFile], File()] = None,
):
    candidate_form = validate_form(
        CandidateFormSchema,
        "Full name, motto and election are required",
        full_name=full_name,
        motto=motto,
        election_id=current_election,
    )
    validate_image(image, "Image")

    asset = None
    try:
        async with session.begin():
            if await ElectionCrud.get_election_by_id(session, candidate_form.election_id) is None:
                raise NotFoundError("Election not found")

        asset = await storage.upload(image, settings.CLOUDINARY_CANDIDATE_FOLDER)

        # candidate row and election link commit together
        async with session.begin():
            election = await ElectionCrud.get_election_by_id(
                session, candidate_form.election_id, with_relations=True
            )
            if election is None:
                raise NotFoundError("Election not found")

            candidate = await CandidateCrud.create_candidate(session, election, {
                "full_name": candidate_form.full_name,
                "motto": candidate_form.motto,
                "image": asset.url,
                "image_asset_id": asset.asset_id,
            })
            response = CandidateCreatedResponse(
                message="Candidate added successfully",
                candidate=CandidateResponse.model_validate(candidate)
            )

        logger.info(f"Candidate {candidate.id} added to election {candidate_form.election_id}")
        return response

    except Exception as e:
        await session.rollback()
        if asset is not None:
            await storage.delete_quietly(asset.asset_id)
        if isinstance(e, VotingError):
            raise
        logger.exception("Failed to add candidate")
        raise InternalError(f"Failed to add candidate: {str(e)}")


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    session: AsyncDBSession,
    candidate_id: UUID,
    current_voter: CurrentVoter
):
    try:
        async with session.begin():
            candidate = await CandidateCrud.get_candidate_by_id(session, candidate_id)
            if not candidate:
                raise NotFoundError("Candidate not found")
            return CandidateResponse.model_validate(candidate)

    except VotingError:
        raise
    except Exception as e:
        raise InternalError(f"Failed to fetch candidate: {str(e)}")


@router.delete("/{candidate_id}", response_model=MessageResponse)
async def remove_candidate(
    session: AsyncDBSession,
    storage: AssetStorageDep,
    candidate_id: UUID,
    current_admin: AdminVoter
):
    try:
        async with session.begin():
            candidate = await CandidateCrud.get_candidate_by_id(session, candidate_id)
            if not candidate:
                raise NotFoundError("Candidate not found")
            image_asset_id = candidate.image_asset_id

            election = await ElectionCrud.get_election_by_id(
                session, candidate.election_id, with_relations=True
            )
            await CandidateCrud.delete_candidate(session, election, candidate)

    except VotingError:
        raise
    except Exception as e:
        await session.rollback()
        logger.exception("Failed to remove candidate")
        raise InternalError(f"Failed to remove candidate: {str(e)}")

    await storage.delete_quietly(image_asset_id)

    logger.info(f"Candidate {candidate_id} removed by {current_admin.id}")
    return MessageResponse(message="Candidate removed successfully")


@router.post("/{candidate_id}/vote", response_model=List[UUID])
async def vote_candidate(
    session: AsyncDBSession,
    candidate_id: UUID,
    current_voter: CurrentVoter,
    vote_data: Optional[VoteRequestSchema] = None
):
    """Cast the current voter's single vote in the candidate's election.

    Returns the voter's updated list of elections voted in.
    """
    vote_data = vote_data or VoteRequestSchema()
    if vote_data.current_voter_id is not None and vote_data.current_voter_id != current_voter.id:
        raise AuthError("You can only vote as yourself")

    try:
        async with session.begin():
            candidate = await CandidateCrud.get_candidate_by_id(session, candidate_id)
            if not candidate:
                raise NotFoundError("Candidate not found")

            voter = await VoterCrud.get_voter_by_id(session, current_voter.id)
            if not voter:
                raise NotFoundError("Voter not found")

            election_id = vote_data.selected_election or candidate.election_id
            election = await ElectionCrud.get_election_by_id(session, election_id)
            if not election:
                raise NotFoundError("Election not found")

            if candidate.election_id != election.id:
                raise ValidationError("Candidate does not belong to this election")

            if await VoteCrud.has_voted(session, voter.id, election.id):
                raise AlreadyVotedError("You have already voted in this election")

            await VoteCrud.record_vote(session, voter.id, election.id, candidate.id)

            voted_elections = await VoteCrud.get_voted_election_ids(session, voter.id)

        logger.info(f"Voter {voter.id} voted in election {election.id}")
        return voted_elections

    except VotingError:
        raise
    except Exception as e:
        await session.rollback()
        logger.exception("Voting failed")
        raise InternalError(f"Voting failed: {str(e)}")
