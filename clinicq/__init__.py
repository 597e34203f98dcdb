"""ClinicQ patient queue client (REST + Socket.IO).

Keeps a local mirror of a clinic's shared patient queue and doctor
availability, and alerts a registered patient when it becomes their turn:
- a RemoteQueueClient merging REST hydration and Socket.IO push into one stream
- a QueueStateStore holding the latest snapshot
- a TurnMatcher / TurnNotifier pair deciding when to ring the patient
- an ActionSubmitter for the queue/doctor mutations
- a monitor board for the waiting-room display

See `python -m clinicq.app -h` for how to run.
"""
