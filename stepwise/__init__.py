"""StepWise weekly activity scoring: per-user weekly scores, ranks and winner/loser classification."""
