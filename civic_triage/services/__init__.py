"""
Services layer - Business logic goes here.
Keep services focused on one stage of triage each; the pipeline composes them.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services receive their collaborators explicitly (see core/container.py)
- Analysis and enrichment are best-effort; persistence and routing are not
"""
