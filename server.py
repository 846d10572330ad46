"""
MCP server for pipe system pressure drop and pump selection.

Exposes the hydraulics engine as tools: segment, series-system and 3-D route
pressure drop, pump operating point and NPSH, pump suggestion by specific
speed, unit conversion and the fitting/material/pipe reference data.
"""

import logging
from mcp.server.fastmcp import FastMCP

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("hydraulics-mcp")

# Initialize the MCP server
mcp = FastMCP("hydraulics-calculator")

from tools import (
    calculate_segment_pressure_drop,
    calculate_system_pressure_drop,
    calculate_route_pressure_drop,
    select_pump_operating_point,
    suggest_pump,
    convert_units,
    list_fittings,
    list_materials,
    get_pipe_dimensions,
)

TOOLS = [
    calculate_segment_pressure_drop,
    calculate_system_pressure_drop,
    calculate_route_pressure_drop,
    select_pump_operating_point,
    suggest_pump,
    convert_units,
    list_fittings,
    list_materials,
    get_pipe_dimensions,
]

# Register tools with MCP
for tool in TOOLS:
    mcp.tool()(tool)


def main():
    from hydraulics.fittings import load_default_catalog

    logger.info("Starting Hydraulics MCP server...")
    logger.info("Fitting catalog entries: %d", len(load_default_catalog()))
    logger.info("Registered tools:")
    for tool in TOOLS:
        logger.info("  - %s", tool.__name__)

    # Start the server
    mcp.run()


if __name__ == "__main__":
    main()
