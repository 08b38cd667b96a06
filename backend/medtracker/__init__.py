"""MedTracker: study tracking API for medical students."""
