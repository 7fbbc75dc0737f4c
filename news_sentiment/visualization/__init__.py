"""Figures for dictionary and LSS sentiment series."""
