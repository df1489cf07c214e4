"""
Core business logic modules for PrepCoach

Contains:
- Interview Orchestrator: State machine for the session lifecycle
- Question Provider and Question Bank: Question generation with static fallback
- AI Reasoning: Model-backed questions, scoring and recommendations
- Audio Processing and Media Analysis: Transcripts and delivery signals
- Evaluation Engine: Answer scoring cascade
- Performance Aggregator: Session summaries
"""
