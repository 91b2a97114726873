"""Workout Logger: workout and exercise logging API with a terminal front end."""
