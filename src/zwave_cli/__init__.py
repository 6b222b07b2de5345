"""ZWave Bridge - a CLI for the zwave_bridge library."""
