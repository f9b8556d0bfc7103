"""Fluid statics: pressure with depth, manometers, buoyancy and forces on submerged surfaces."""
