from fastapi import APIRouter
from api.voter_api import router as voter_router
from api.election_api import router as election_router
from api.candidate_api import router as candidate_router


api_router = APIRouter()
api_router.include_router(voter_router)
api_router.include_router(election_router)
api_router.include_router(candidate_router)
