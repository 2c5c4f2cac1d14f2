from django.urls import path

from ledger import handlers

urlpatterns = [
    path("sessions", handlers.SessionStartView.as_view(), name="session-start"),
    path("sessions/active", handlers.CurrentSessionView.as_view(), name="session-active"),
    path("sessions/<str:session_id>/end", handlers.SessionEndView.as_view(), name="session-end"),
    path("sessions/<str:session_id>/pause", handlers.SessionPauseView.as_view(), name="session-pause"),
    path("sessions/<str:session_id>/resume", handlers.SessionResumeView.as_view(), name="session-resume"),
    path("sessions/<str:session_id>/seats", handlers.SeatPlayerView.as_view(), name="session-seats"),
    path("sessions/<str:session_id>/stack", handlers.StackUpdateView.as_view(), name="session-stack"),
    path("sessions/<str:session_id>/rebuys", handlers.RebuyView.as_view(), name="session-rebuys"),
    path("sessions/<str:session_id>/addons", handlers.AddonView.as_view(), name="session-addons"),
    path(
        "sessions/<str:session_id>/hands-passed",
        handlers.HandsPassedView.as_view(),
        name="session-hands-passed",
    ),
    path("sessions/<str:session_id>/hands", handlers.HandRecordedView.as_view(), name="session-hands"),
    path(
        "sessions/<str:session_id>/hand-completes",
        handlers.HandCompleteView.as_view(),
        name="session-hand-completes",
    ),
    path(
        "sessions/<str:session_id>/hand-completes/latest",
        handlers.LatestHandCompleteView.as_view(),
        name="session-hand-completes-latest",
    ),
    path("sessions/<str:session_id>/all-ins", handlers.AllInView.as_view(), name="session-all-ins"),
    path("sessions/<str:session_id>/events", handlers.SessionEventListView.as_view(), name="session-events"),
    path("sessions/<str:session_id>/timeline", handlers.SessionTimelineView.as_view(), name="session-timeline"),
    path(
        "sessions/<str:session_id>/tournament/basic",
        handlers.TournamentBasicView.as_view(),
        name="tournament-basic",
    ),
    path(
        "sessions/<str:session_id>/tournament/blinds",
        handlers.TournamentBlindsView.as_view(),
        name="tournament-blinds",
    ),
    path(
        "sessions/<str:session_id>/tournament/prizes",
        handlers.TournamentPrizesView.as_view(),
        name="tournament-prizes",
    ),
    path(
        "sessions/<str:session_id>/tournament/overrides",
        handlers.TournamentOverridesView.as_view(),
        name="tournament-overrides",
    ),
    path(
        "sessions/<str:session_id>/tournament/timer",
        handlers.TournamentTimerView.as_view(),
        name="tournament-timer",
    ),
    path(
        "sessions/<str:session_id>/tournament/field",
        handlers.TournamentFieldView.as_view(),
        name="tournament-field",
    ),
    path("events/<str:event_id>", handlers.EventDetailView.as_view(), name="event-detail"),
]
