"""NorthStar - staged decision-support pipeline.

Turns a profile and ranked goals into candidate timelines, compares them,
compiles a 90-day plan for the chosen one and writes a short text trailer.
Every stage can run against a generative model or fall back to a
deterministic generator built only from the user's structured input.
"""
