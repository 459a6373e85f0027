"""Grid layout and reveal timing planner for video mosaic walls."""
