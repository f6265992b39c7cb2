"""
The ENGINE layer turns a ScalingSpec and ScreenMetrics into a final size.
It deals with Override Resolution, Strategy Formulas, Caching and Units.
"""
