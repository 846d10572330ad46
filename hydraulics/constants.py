"""
Constants used across the hydraulics engine.

This module defines unit conversion factors, regime thresholds and default values.
All internal calculations are SI: length m (pipe diameters in mm), pressure Pa,
density kg/m³, viscosity Pa·s, velocity m/s, flow rate m³/s, temperature °C.
"""

# Physical constants
G_GRAVITY = 9.80665          # Standard gravity acceleration, m/s² (NIST value)

# Conversion factors for unit flexibility
GPM_to_M3S = 6.30902e-5      # US GPM to m³/s
M3H_to_M3S = 1.0 / 3600.0    # m³/h to m³/s
LPM_to_M3S = 1.0 / 60000.0   # L/min to m³/s
LPS_to_M3S = 1.0e-3          # L/s to m³/s
INCH_to_M = 0.0254           # inch to meter
MM_to_M = 0.001              # millimeter to meter
FT_to_M = 0.3048             # foot to meter
PSI_to_PA = 6894.757         # psi to Pascal
KPA_to_PA = 1000.0           # kPa to Pascal
MPA_to_PA = 1.0e6            # MPa to Pascal
BAR_to_PA = 1.0e5            # bar to Pascal
KGFCM2_to_PA = 98066.5       # kgf/cm² to Pascal
MMH2O_to_PA = 9.80665        # mm water column to Pascal
DEG_C_to_K = 273.15          # Celsius to Kelvin (offset)

# Flow regime thresholds (Reynolds number)
LAMINAR_REYNOLDS = 2100.0    # below: laminar, f = 64/Re
TURBULENT_REYNOLDS = 4000.0  # at or above: turbulent

# Darby 3-K stated diameter range, inches
DARBY_3K_D_MIN_IN = 0.5
DARBY_3K_D_MAX_IN = 24.0

# Default liquid properties (water at 20 °C)
DEFAULT_WATER_DENSITY = 998.2     # kg/m³
DEFAULT_WATER_VISCOSITY = 1.002e-3  # Pa·s
DEFAULT_WATER_VAPOR_PRESSURE_KPA = 2.339  # kPa

DEFAULT_ATMOSPHERIC_PRESSURE_KPA = 101.325  # kPa

# Resistance curve sampling defaults
DEFAULT_CURVE_POINTS = 20
DEFAULT_MAX_FLOW_RATIO = 1.5

# Solver bounds for flow-rate search, m³/s
SOLVER_FLOW_MIN = 1e-8
SOLVER_FLOW_MAX = 10.0

# Pump selection margins
NPSHR_SAFETY_FACTOR = 0.8    # maximum allowable NPSHr as a fraction of NPSHa
