from ledger.handlers.views import (
    AddonView,
    AllInView,
    CurrentSessionView,
    EventDetailView,
    HandCompleteView,
    HandRecordedView,
    HandsPassedView,
    LatestHandCompleteView,
    RebuyView,
    SeatPlayerView,
    SessionEndView,
    SessionEventListView,
    SessionPauseView,
    SessionResumeView,
    SessionStartView,
    SessionTimelineView,
    StackUpdateView,
    TournamentBasicView,
    TournamentBlindsView,
    TournamentFieldView,
    TournamentOverridesView,
    TournamentPrizesView,
    TournamentTimerView,
)

__all__ = [
    "AddonView",
    "AllInView",
    "CurrentSessionView",
    "EventDetailView",
    "HandCompleteView",
    "HandRecordedView",
    "HandsPassedView",
    "LatestHandCompleteView",
    "RebuyView",
    "SeatPlayerView",
    "SessionEndView",
    "SessionEventListView",
    "SessionPauseView",
    "SessionResumeView",
    "SessionStartView",
    "SessionTimelineView",
    "StackUpdateView",
    "TournamentBasicView",
    "TournamentBlindsView",
    "TournamentFieldView",
    "TournamentOverridesView",
    "TournamentPrizesView",
    "TournamentTimerView",
]
