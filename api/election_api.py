import logging
from typing import Annotated, List, Optional
from uuid import UUID
from fastapi import APIRouter, File, Form, UploadFile, status

from core.depends import AsyncDBSession, AssetStorageDep, AdminVoter, CurrentVoter
from core.exceptions import InternalError, NotFoundError, VotingError
from core.settings import settings
from core.storage import validate_image
from schemas.base_schema import validate_form
from schemas.election_schema import ElectionFormSchema, ElectionResponse
from schemas.candidate_schema import CandidateResponse
from schemas.voter_schema import MessageResponse, VoterResponse
from crud.election_crud import election_crud as ElectionCrud
from crud.candidate_crud import candidate_crud as CandidateCrud
from crud.vote_crud import vote_crud as VoteCrud

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/elections",
    tags=["elections"]
)


@router.post("", response_model=ElectionResponse, status_code=status.HTTP_201_CREATED)
async def add_election(
    session: AsyncDBSession,
    storage: AssetStorageDep,
    current_admin: AdminVoter,
    title: Annotated[Optional[str], Form()] = None,
    description: Annotated[Optional[str], Form()] = None,
    thumbnail: Annotated[Optional[UploadFile], File()] = None,
):
    election_form = validate_form(
        ElectionFormSchema,
        "Title and description are required",
        title=title,
        description=description,
    )
    validate_image(thumbnail, "Thumbnail")

    asset = None
    try:
        asset = await storage.upload(thumbnail, settings.CLOUDINARY_ELECTION_FOLDER)

        async with session.begin():
            election = await ElectionCrud.create_election(session, {
                "title": election_form.title,
                "description": election_form.description,
                "thumbnail": asset.url,
                "thumbnail_asset_id": asset.asset_id,
            })
            response_data = ElectionCrud.build_election_response_data(election)

        logger.info(f"Election {election.id} created by {current_admin.id}")
        return ElectionResponse.model_validate(response_data)

    except Exception as e:
        await session.rollback()
        if asset is not None:
            await storage.delete_quietly(asset.asset_id)
        if isinstance(e, VotingError):
            raise
        logger.exception("Failed to create election")
        raise InternalError(f"Failed to create election: {str(e)}")


@router.get("", response_model=List[ElectionResponse])
async def get_elections(
    session: AsyncDBSession,
    current_voter: CurrentVoter
):
    try:
        async with session.begin():
            elections = await ElectionCrud.get_all_elections(session)
            return [
                ElectionResponse.model_validate(ElectionCrud.build_election_response_data(election))
                for election in elections
            ]

    except Exception as e:
        raise InternalError(f"Failed to fetch elections: {str(e)}")


@router.get("/{election_id}", response_model=ElectionResponse)
async def get_election(
    session: AsyncDBSession,
    election_id: UUID,
    current_voter: CurrentVoter
):
    try:
        async with session.begin():
            election = await ElectionCrud.get_election_by_id(session, election_id, with_relations=True)
            if not election:
                raise NotFoundError("Election not found")
            return ElectionResponse.model_validate(ElectionCrud.build_election_response_data(election))

    except VotingError:
        raise
    except Exception as e:
        raise InternalError(f"Failed to fetch election: {str(e)}")


@router.patch("/{election_id}", response_model=MessageResponse)
async def update_election(
    session: AsyncDBSession,
    storage: AssetStorageDep,
    election_id: UUID,
    current_admin: AdminVoter,
    title: Annotated[Optional[str], Form()] = None,
    description: Annotated[Optional[str], Form()] = None,
    thumbnail: Annotated[Optional[UploadFile], File()] = None,
):
    election_form = validate_form(
        ElectionFormSchema,
        "Title and description are required",
        title=title,
        description=description,
    )
    if thumbnail is not None and thumbnail.filename:
        validate_image(thumbnail, "Thumbnail")
    else:
        thumbnail = None

    asset = None
    try:
        async with session.begin():
            if await ElectionCrud.get_election_by_id(session, election_id) is None:
                raise NotFoundError("Election not found")

        if thumbnail is not None:
            asset = await storage.upload(thumbnail, settings.CLOUDINARY_ELECTION_FOLDER)

        async with session.begin():
            election = await ElectionCrud.get_election_by_id(session, election_id)
            if not election:
                raise NotFoundError("Election not found")
            old_asset_id = election.thumbnail_asset_id

            update_data = {
                "title": election_form.title,
                "description": election_form.description,
            }
            if asset is not None:
                update_data["thumbnail"] = asset.url
                update_data["thumbnail_asset_id"] = asset.asset_id

            await ElectionCrud.update_election(session, election_id, update_data)

    except Exception as e:
        await session.rollback()
        if asset is not None:
            await storage.delete_quietly(asset.asset_id)
        if isinstance(e, VotingError):
            raise
        logger.exception("Failed to update election")
        raise InternalError(f"Failed to update election: {str(e)}")

    # old thumbnail goes only once the new one is committed
    if asset is not None and old_asset_id != asset.asset_id:
        await storage.delete_quietly(old_asset_id)

    logger.info(f"Election {election_id} updated by {current_admin.id}")
    return MessageResponse(message="Election updated successfully")


@router.delete("/{election_id}", response_model=MessageResponse)
async def remove_election(
    session: AsyncDBSession,
    storage: AssetStorageDep,
    election_id: UUID,
    current_admin: AdminVoter
):
    try:
        async with session.begin():
            election = await ElectionCrud.get_election_by_id(session, election_id)
            if not election:
                raise NotFoundError("Election not found")
            thumbnail_asset_id = election.thumbnail_asset_id

            image_asset_ids = await ElectionCrud.delete_election(session, election_id)

    except VotingError:
        raise
    except Exception as e:
        await session.rollback()
        logger.exception("Failed to delete election")
        raise InternalError(f"Failed to delete election: {str(e)}")

    await storage.delete_quietly(thumbnail_asset_id)
    for asset_id in image_asset_ids:
        await storage.delete_quietly(asset_id)

    logger.info(f"Election {election_id} and {len(image_asset_ids)} candidate image(s) deleted by {current_admin.id}")
    return MessageResponse(message="Election deleted successfully")


@router.get("/{election_id}/candidates", response_model=List[CandidateResponse])
async def get_candidates_of_election(
    session: AsyncDBSession,
    election_id: UUID,
    current_voter: CurrentVoter
):
    try:
        async with session.begin():
            election = await ElectionCrud.get_election_by_id(session, election_id)
            if not election:
                raise NotFoundError("Election not found")

            candidates = await CandidateCrud.get_candidates_by_election(session, election_id)
            return [CandidateResponse.model_validate(candidate) for candidate in candidates]

    except VotingError:
        raise
    except Exception as e:
        raise InternalError(f"Failed to fetch candidates: {str(e)}")


@router.get("/{election_id}/voters", response_model=List[VoterResponse])
async def get_election_voters(
    session: AsyncDBSession,
    election_id: UUID,
    current_voter: CurrentVoter
):
    try:
        async with session.begin():
            election = await ElectionCrud.get_election_by_id(session, election_id)
            if not election:
                raise NotFoundError("Election not found")

            voters = await VoteCrud.get_voters_by_election(session, election_id)
            history = await VoteCrud.get_voted_election_ids_for_voters(session, [voter.id for voter in voters])

            return [
                VoterResponse(
                    id=voter.id,
                    full_name=voter.full_name,
                    email=voter.email,
                    is_admin=voter.is_admin,
                    voted_elections=history.get(voter.id, []),
                    created_at=voter.created_at
                )
                for voter in voters
            ]

    except VotingError:
        raise
    except Exception as e:
        raise InternalError(f"Failed to fetch voters: {str(e)}")
