"""Core logic: domain model, nmcli gateway, merge engine, session state machine."""
