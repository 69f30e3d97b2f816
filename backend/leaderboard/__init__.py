"""Stock leaderboard service: polls quotes, ranks movers, streams live updates."""
