"""Wedding services booking lifecycle engine."""
