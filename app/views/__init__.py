"""Stateless views derived from store records (calendar grid, hexagon, prayer, pomodoro, lists)."""
