"""Runtime helpers shared by the snapshot and report surfaces."""
