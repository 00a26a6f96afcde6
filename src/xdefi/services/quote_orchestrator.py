"""Live quote orchestration for an exact-input swap form.

The orchestrator owns the quote state shown to the user. Inputs (chain,
tokens, amount, enabled flag) are pushed in through setters; the amount goes
through a Debouncer so typing does not fire a request per keystroke.

Every issued request is tagged with a generation number. A completion is
applied only when its generation is still the current one, so when requests
overlap the last one issued wins, whatever order the responses arrive in.
There is no upstream cancellation: superseded requests run to completion and
their results are dropped.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from xdefi.config import get_settings
from xdefi.routing.base import Quote, QuoteFetcher, QuoteRequest, TokenRef
from xdefi.routing.normalizer import display_amount_out
from xdefi.utils.debounce import Debouncer
from xdefi.utils.units import is_positive_amount, parse_units

logger = logging.getLogger(__name__)


class QuoteStatus(str, Enum):
    """Lifecycle of the displayed quote."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    SETTLED = "settled"
    FAILED = "failed"


class QuoteError(str, Enum):
    """Why the last request produced no quote."""

    UNAVAILABLE = "quote_unavailable"  # upstream reported no usable route
    FAILED = "quote_failed"  # transport failure or unexpected exception


@dataclass(frozen=True)
class QuoteMeta:
    """Quote details shown next to the output amount."""

    trade_fee_usd: Optional[str] = None
    price_impact_percent: Optional[str] = None


@dataclass(frozen=True)
class QuoteState:
    """Immutable snapshot of the orchestrator's visible state."""

    status: QuoteStatus = QuoteStatus.IDLE
    to_amount: str = ""
    meta: Optional[QuoteMeta] = None
    error: Optional[QuoteError] = None
    loading: bool = False
    is_debouncing: bool = False
    debounced_amount_in: str = ""
    quote: Optional[Quote] = None
    generation: int = 0


@dataclass(frozen=True)
class TaggedResult:
    """Outcome of one quote request, tagged with the generation that issued it."""

    generation: int
    quote: Optional[Quote] = None
    error: Optional[QuoteError] = None
    detail: Optional[str] = None


class QuoteOrchestrator:
    """Turns swap form inputs into a display-ready quote.

    Setters must be called from within the running event loop.

    Example:
        orchestrator = QuoteOrchestrator(OkxClient())
        orchestrator.subscribe(render)
        orchestrator.set_chain_id(8453)
        orchestrator.set_from_token(TokenRef(usdc_address, 6))
        orchestrator.set_to_token(TokenRef(weth_address, 18))
        orchestrator.set_amount_in("100")
    """

    def __init__(
        self,
        fetcher: QuoteFetcher,
        debounce_seconds: Optional[float] = None,
        display_digits: Optional[int] = None,
    ):
        """Initialize the orchestrator.

        Args:
            fetcher: Source of quotes (normally an OkxClient)
            debounce_seconds: Quiet period for amount input (defaults to settings)
            display_digits: Max fractional digits of the displayed amount
        """
        settings = get_settings()
        if debounce_seconds is None:
            debounce_seconds = settings.quote_debounce_seconds
        self.display_digits = (
            display_digits if display_digits is not None else settings.display_fraction_digits
        )

        self._fetcher = fetcher
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, initial="")
        self._debouncer.subscribe(self._on_amount_settled)

        # Inputs
        self._chain_id: Optional[int] = None
        self._from_token: Optional[TokenRef] = None
        self._to_token: Optional[TokenRef] = None
        self._enabled = True

        # Output
        self._phase = QuoteStatus.IDLE
        self._to_amount = ""
        self._meta: Optional[QuoteMeta] = None
        self._error: Optional[QuoteError] = None
        self._quote: Optional[Quote] = None
        self._loading = False

        self._generation = 0
        self._last_key: Optional[tuple] = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Callable[[QuoteState], None]] = []
        self._state = QuoteState()
        self._closed = False

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> QuoteState:
        return self._state

    @property
    def generation(self) -> int:
        """Generation of the current request; results for any other are stale."""
        return self._generation

    def subscribe(self, listener: Callable[[QuoteState], None]) -> Callable[[], None]:
        """Register a listener called with every new state snapshot.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_chain_id(self, chain_id: Optional[int]) -> None:
        self._chain_id = chain_id
        self._evaluate()

    def set_from_token(self, token: Optional[TokenRef]) -> None:
        self._from_token = token
        self._evaluate()

    def set_to_token(self, token: Optional[TokenRef]) -> None:
        self._to_token = token
        self._evaluate()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        self._evaluate()

    def set_amount_in(self, amount_in: Optional[str]) -> None:
        """Record typed input; it is quoted once the quiet period passes."""
        if self._closed:
            return
        self._debouncer.update(amount_in or "")
        self._publish()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _on_amount_settled(self, _amount: str) -> None:
        self._evaluate()

    def _input_key(self, amount: str) -> tuple:
        from_token, to_token = self._from_token, self._to_token
        return (
            self._chain_id,
            from_token.address if from_token else None,
            to_token.address if to_token else None,
            from_token.decimals if from_token else None,
            to_token.decimals if to_token else None,
            amount,
            self._enabled,
        )

    def _evaluate(self) -> None:
        """Re-check preconditions after an input change and issue a request."""
        if self._closed:
            return

        amount = self._debouncer.value.strip()
        key = self._input_key(amount)
        if key == self._last_key:
            self._publish()
            return
        self._last_key = key

        from_token, to_token = self._from_token, self._to_token
        if (
            not self._enabled
            or not self._chain_id
            or not from_token
            or not from_token.address
            or not to_token
            or not to_token.address
            or not is_positive_amount(amount)
        ):
            self._reset()
            return

        try:
            amount_raw = parse_units(amount, from_token.resolved_decimals)
        except ValueError as e:
            logger.debug(f"Amount {amount!r} not convertible to atomic units: {e}")
            self._reset()
            return
        if amount_raw == 0:
            logger.debug(f"Amount {amount!r} is below one atomic unit")
            self._reset()
            return

        self._issue(
            QuoteRequest(
                chain_id=self._chain_id,
                token_in=from_token.address,
                token_out=to_token.address,
                amount_raw_in=str(amount_raw),
            )
        )

    def _reset(self) -> None:
        """Clear output and invalidate any in-flight request."""
        self._generation += 1
        self._phase = QuoteStatus.IDLE
        self._to_amount = ""
        self._meta = None
        self._error = None
        self._quote = None
        self._loading = False
        self._publish()

    def _issue(self, request: QuoteRequest) -> None:
        self._generation += 1
        generation = self._generation

        self._phase = QuoteStatus.FETCHING
        self._loading = True
        self._error = None
        self._meta = None
        self._publish()

        logger.debug(f"Issuing quote request #{generation}: {request}")
        task = asyncio.get_running_loop().create_task(self._fetch(generation, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, generation: int, request: QuoteRequest) -> None:
        try:
            quote = await self._fetcher.get_quote(request)
        except Exception as e:
            result = TaggedResult(
                generation, error=QuoteError.FAILED, detail=f"{type(e).__name__}: {e}"
            )
        else:
            if quote is None:
                result = TaggedResult(generation, error=QuoteError.UNAVAILABLE)
            else:
                result = TaggedResult(generation, quote=quote)
        self.apply_result(result)

    def apply_result(self, result: TaggedResult) -> bool:
        """Apply a request outcome if it belongs to the current generation.

        Returns:
            True if the result was applied, False if it was stale
        """
        if self._closed or result.generation != self._generation:
            logger.debug(
                f"Dropping stale quote result #{result.generation} "
                f"(current #{self._generation})"
            )
            return False

        self._loading = False

        if result.quote is not None and result.error is None:
            to_decimals = self._to_token.decimals if self._to_token else None
            self._to_amount = display_amount_out(result.quote, to_decimals, self.display_digits)
            self._meta = QuoteMeta(
                trade_fee_usd=result.quote.trade_fee_usd,
                price_impact_percent=result.quote.price_impact_percent,
            )
            self._quote = result.quote
            self._error = None
            self._phase = QuoteStatus.SETTLED
            logger.debug(f"Quote #{result.generation} settled: {self._to_amount}")
        else:
            error = result.error or QuoteError.FAILED
            if error is QuoteError.FAILED:
                logger.warning(f"Quote request #{result.generation} failed: {result.detail}")
            else:
                logger.info(f"Quote request #{result.generation}: no quote available")
            self._to_amount = ""
            self._meta = None
            self._quote = None
            self._error = error
            self._phase = QuoteStatus.FAILED

        self._publish()
        return True

    def _publish(self) -> None:
        debouncing = self._debouncer.pending and self._enabled
        state = QuoteState(
            status=QuoteStatus.DEBOUNCING if debouncing else self._phase,
            to_amount=self._to_amount,
            meta=self._meta,
            error=self._error,
            loading=self._loading,
            is_debouncing=self._debouncer.pending,
            debounced_amount_in=self._debouncer.value,
            quote=self._quote,
            generation=self._generation,
        )
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_for_requests(self) -> None:
        """Wait until every request issued so far has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Tear down: drop the pending amount and ignore in-flight results."""
        if self._closed:
            return
        self._debouncer.close()
        self._generation += 1
        self._loading = False
        self._publish()
        self._closed = True
        self._listeners.clear()
