"""Multi-party consensus votes for airlines registered past the threshold."""

import logging
import math

from .errors import DuplicateVote, InvalidState, Unauthorized
from .models.airline import Airline
from .models.contract_state import ContractState

logger = logging.getLogger(__name__)


class ConsensusVoter:
    """Accumulates approved airlines' votes for proposed airlines."""

    def required_votes(self, state: ContractState) -> int:
        """
        Votes needed to accept a proposed airline.

        Always computed from the current registry size, so a candidate's
        bar rises as more airlines register while its votes are pending.
        """
        return math.ceil(state.registered_count / 2)

    def vote_for_airline(self, state: ContractState, caller: str, candidate: str) -> Airline:
        """
        Cast the caller's vote for a proposed airline.

        Args:
            state: Contract storage
            caller: Voting airline (must be approved)
            candidate: Proposed airline's address

        Returns:
            The candidate entry, with `accepted` set once votes reach the quorum

        Raises:
            Unauthorized: If the caller is not an approved airline
            InvalidState: If the candidate is unknown or already accepted
            DuplicateVote: If the caller already voted for the candidate
        """
        voter = state.airlines.get(caller)
        if voter is None or not voter.is_approved:
            raise Unauthorized("Only approved airlines can vote", {"caller": caller})

        airline = state.airlines.get(candidate)
        if airline is None:
            raise InvalidState(f"Airline {candidate} is not registered", {"airline": candidate})
        if airline.accepted:
            raise InvalidState(f"Airline {candidate} does not need votes", {"airline": candidate})
        if caller in airline.voters:
            raise DuplicateVote(
                f"Airline {caller} already voted for {candidate}",
                {"caller": caller, "airline": candidate},
            )

        airline.voters.append(caller)
        required = self.required_votes(state)
        logger.info(f"Vote from {caller} for {candidate}: {len(airline.voters)}/{required}")

        if len(airline.voters) >= required:
            airline.accepted = True
            logger.info(f"Airline {airline.name} ({candidate}) accepted by consensus")
        return airline
