"""News log and milestone (trust) emission."""
from dataclasses import replace

from cosmic_paperclip.config import Config
from cosmic_paperclip.numbers import BigNum, ONE, ZERO

# (flag, remaining-matter fraction, message template), in firing priority
MILESTONES = (
    ('half', BigNum('0.5'), "{stage}: 50% of accessible matter consumed."),
    ('ten', BigNum('0.1'), "{stage}: 90% consumed. Supply lines tighten."),
    ('one', BigNum('0.01'), "{stage}: Final reserves detected."),
)


def push_news(state, message):
    """Prepend message, keeping the most recent NEWS_LIMIT entries."""
    news = (message,) + tuple(state.news)
    return replace(state, news=news[:Config.NEWS_LIMIT])


def remaining_fraction(matter, total_matter):
    """clamp01(matter / total_matter); 0 when the stage has no budget."""
    total_matter = BigNum.coerce(total_matter)
    if total_matter.lte(0):
        return ZERO
    frac = BigNum.coerce(matter).div(total_matter)
    return frac.max(ZERO).min(ONE)


def maybe_emit_milestones(state):
    """Fire at most one unfired threshold for the current stage.

    Thresholds are checked half -> ten -> one; the first one that is unset and
    reached fires, grants one trust, and is flagged so it never fires again
    for this stage.
    """
    stage = state.stage
    if stage is None:
        return state

    frac = remaining_fraction(state.matter, stage.total_matter)
    flags = state.flags_for(stage.id)

    for flag, threshold, template in MILESTONES:
        if getattr(flags, flag) or frac.gt(threshold):
            continue
        nxt = push_news(state, template.format(stage=stage.name))
        nxt = nxt.with_flags(stage.id, replace(flags, **{flag: True}))
        return replace(nxt, trust=nxt.trust + 1, unused_trust=nxt.unused_trust + 1)

    return state
