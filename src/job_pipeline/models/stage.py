"""
Pipeline stage vocabulary and the follow-up transition table.

The store keeps stages as display strings with a leading glyph
(e.g. "⏸️ Pending Approval"). Everything inside the core works on the
logical Stage token; the glyph label is only looked up at the store
boundary. Label matching is exact string equality.
"""

from enum import Enum

from ..errors import NoProgressionDefinedError


class Stage(str, Enum):
    """Where a job sits in the pipeline, in pipeline order."""

    NEW = 'new'
    PENDING_APPROVAL = 'pending_approval'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    PROTOTYPE_BUILDING = 'prototype_building'
    BUILD_FAILED = 'build_failed'
    PROTOTYPE_BUILT = 'prototype_built'
    SEND_LOOM = 'send_loom'
    DEPLOYED = 'deployed'
    INITIAL_MESSAGE_SENT = 'initial_message_sent'
    TOUCHPOINT_1 = 'touchpoint_1'
    TOUCHPOINT_2 = 'touchpoint_2'
    TOUCHPOINT_3 = 'touchpoint_3'
    LIGHT_ENGAGEMENT = 'light_engagement'
    ENGAGEMENT_WITH_PROTOTYPE = 'engagement_with_prototype'
    CLOSED_WON = 'closed_won'
    CLOSED_LOST = 'closed_lost'

    @property
    def label(self) -> str:
        """Store representation of this stage."""
        return STAGE_LABELS[self]

    @classmethod
    def from_label(cls, label: str | None) -> 'Stage | None':
        """Resolve a store label to a Stage; unknown or empty labels give None."""
        if not label:
            return None
        return _STAGES_BY_LABEL.get(label)

    @classmethod
    def parse(cls, value: 'Stage | str | None') -> 'Stage | None':
        """Accept a Stage, a logical token ('touchpoint_1') or a store label."""
        if isinstance(value, Stage):
            return value
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return cls.from_label(value)


STAGE_LABELS: dict[Stage, str] = {
    Stage.NEW: '🆕 New',
    Stage.PENDING_APPROVAL: '⏸️ Pending Approval',
    Stage.APPROVED: '✅ Approved',
    Stage.REJECTED: '🚫 Rejected',
    Stage.PROTOTYPE_BUILDING: '🔨 Prototype Building',
    Stage.BUILD_FAILED: '⚠️ Build Failed',
    Stage.PROTOTYPE_BUILT: '🎁 Prototype Built',
    Stage.SEND_LOOM: '🎥 Send Loom',
    Stage.DEPLOYED: '🏗️ Deployed',
    Stage.INITIAL_MESSAGE_SENT: '💌 Initial message sent',
    Stage.TOUCHPOINT_1: '📆 Touchpoint 1',
    Stage.TOUCHPOINT_2: '📆 Touchpoint 2',
    Stage.TOUCHPOINT_3: '📆 Touchpoint 3',
    Stage.LIGHT_ENGAGEMENT: '🧐 Light Engagement',
    Stage.ENGAGEMENT_WITH_PROTOTYPE: '🕺 Engagement with prototype',
    Stage.CLOSED_WON: '🏁 Closed Won',
    Stage.CLOSED_LOST: '➡️ Closed Lost',
}

_STAGES_BY_LABEL: dict[str, Stage] = {label: stage for stage, label in STAGE_LABELS.items()}


# Stages where follow-up messages happen
FOLLOW_UP_STAGES: tuple[Stage, ...] = (
    Stage.INITIAL_MESSAGE_SENT,
    Stage.TOUCHPOINT_1,
    Stage.TOUCHPOINT_2,
    Stage.TOUCHPOINT_3,
)

# Closed stages are excluded from active views
CLOSED_STAGES: tuple[Stage, ...] = (
    Stage.CLOSED_WON,
    Stage.CLOSED_LOST,
)

# Prototype done, application not yet sent
READY_TO_SEND_STAGES: tuple[Stage, ...] = (
    Stage.DEPLOYED,
    Stage.PROTOTYPE_BUILT,
)

# Active engagement, shown on the closing board
ENGAGEMENT_STAGES: tuple[Stage, ...] = (
    Stage.LIGHT_ENGAGEMENT,
    Stage.ENGAGEMENT_WITH_PROTOTYPE,
)


# Successor of each stage under "mark followed up". After the third
# touchpoint the job is closed as lost.
TOUCHPOINT_PROGRESSION: dict[Stage, Stage] = {
    Stage.INITIAL_MESSAGE_SENT: Stage.TOUCHPOINT_1,
    Stage.TOUCHPOINT_1: Stage.TOUCHPOINT_2,
    Stage.TOUCHPOINT_2: Stage.TOUCHPOINT_3,
    Stage.TOUCHPOINT_3: Stage.CLOSED_LOST,
}


def next_stage(stage: Stage | None, label: str | None = None) -> Stage:
    """
    Look up the successor of a stage in the transition table.

    Args:
        stage: Current logical stage (None when the store value was unrecognised)
        label: Raw store value, used only in the error message

    Returns:
        The successor stage

    Raises:
        NoProgressionDefinedError: If the stage has no successor
    """
    if stage is not None and stage in TOUCHPOINT_PROGRESSION:
        return TOUCHPOINT_PROGRESSION[stage]
    shown = label if label is not None else (stage.label if stage is not None else '')
    raise NoProgressionDefinedError(shown)


def is_terminal(stage: Stage) -> bool:
    """True for closed stages."""
    return stage in CLOSED_STAGES
