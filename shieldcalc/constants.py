"""Application-wide constants.

Reference: Shielding calculator — engine defaults.
"""

# Build-up model B(x) = A * exp(alpha * x), x in HVL
DEFAULT_BUILDUP_A = 1.2
DEFAULT_BUILDUP_ALPHA = 0.08
BUILDUP_FORMULA = "B(x) = A * exp(alpha * x)"

# Reference isotope when no gamma constant is supplied
DEFAULT_ISOTOPE_ID = "Tc-99m"

# Dose rate targets [µGy/h]
DEFAULT_TARGET_DOSE_RATE_UGY_H = 20.0
DEFAULT_OCCUPANCY_FACTOR = 1.0

# Shielding recommendations (material catalog IDs)
RECOMMENDATION_MATERIALS = ["lead", "concrete", "steel"]
VERTICAL_SOLVER_ITERATIONS = 3

# Heatmap sampling
DEFAULT_HEATMAP_RESOLUTION = 20  # pixels per cell
HEATMAP_BATCH_CELLS = 10  # progress / cancellation cadence
