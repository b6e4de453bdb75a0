from .voter_model import Voter
from .election_model import Election
from .candidate_model import Candidate
from .voted_election_model import VotedElection

__all__ = ['Voter', 'Election', 'Candidate', 'VotedElection']
