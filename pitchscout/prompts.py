"""
Prompt templates sent to the AI gateway.

Each AI endpoint pairs one fixed system prompt with a user prompt that
serializes the request context as indented JSON.
"""

import json
from typing import Any, Optional

from pitchscout.models import ChatIntent


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


# =============================================================================
# VIDEO ANALYSIS
# =============================================================================

POSITION_FOCUS = {
    "GK": "shot stopping, positioning, distribution, command of area, reflexes",
    "CB": "aerial duels, tackling, positioning, passing out from back, reading the game",
    "LB": "overlapping runs, crossing, defensive positioning, stamina, 1v1 defending",
    "RB": "overlapping runs, crossing, defensive positioning, stamina, 1v1 defending",
    "CDM": "interceptions, tackling, passing range, positioning, breaking up play",
    "CM": "passing accuracy, ball retention, box-to-box running, vision, work rate",
    "CAM": "creativity, key passes, shooting from distance, dribbling, final third play",
    "LM": "crossing, pace, dribbling, tracking back, width creation",
    "RM": "crossing, pace, dribbling, tracking back, width creation",
    "LW": "1v1 dribbling, cutting inside, shooting, pace, creativity",
    "RW": "1v1 dribbling, cutting inside, shooting, pace, creativity",
    "ST": "finishing, movement off the ball, hold-up play, aerial ability, positioning in the box",
}

DEFAULT_FOCUS = "overall football skills"


def video_analysis_messages(
    position: str,
    file_name: Optional[str] = None,
    player_age: Optional[int] = None,
    player_height: Optional[int] = None,
) -> list[dict[str, str]]:
    focus = POSITION_FOCUS.get(position, DEFAULT_FOCUS)

    system_prompt = f"""You are an expert football scout and performance analyst with decades of experience evaluating players at all levels. You use advanced motion tracking and event detection to analyze player footage.

Analyze the uploaded video of a {position} player. Focus on: {focus}.

You must return a JSON response with this exact structure:
{{
  "overall_score": <number 1-100>,
  "technical_skills": {{
    "passing": <number 1-100>,
    "ball_control": <number 1-100>,
    "shooting": <number 1-100>,
    "dribbling": <number 1-100>
  }},
  "physical_metrics": {{
    "speed": <number 1-100>,
    "stamina": <number 1-100>,
    "agility": <number 1-100>
  }},
  "tactical_awareness": {{
    "positioning": <number 1-100>,
    "decision_making": <number 1-100>,
    "vision": <number 1-100>
  }},
  "events_detected": {{
    "passes": <number>,
    "shots": <number>,
    "tackles": <number>,
    "interceptions": <number>,
    "sprints": <number>
  }},
  "summary": "<2-3 sentence professional summary of the player's performance>",
  "improvement_tips": ["<tip 1>", "<tip 2>", "<tip 3>"]
}}

Be realistic but encouraging. Base scores on typical semi-professional youth player standards."""

    context_lines = [f"File: {file_name or 'unknown'}", f"Position: {position}"]
    if player_age is not None:
        context_lines.append(f"Age: {player_age}")
    if player_height is not None:
        context_lines.append(f"Height: {player_height} cm")
    context = "\n".join(context_lines)

    user_prompt = f"""Analyze this football match video for a {position} player.

{context}

Provide comprehensive analysis including:
1. Technical skill ratings
2. Physical metrics
3. Tactical awareness
4. Key events detected (passes, shots, tackles, etc.)
5. Professional summary
6. 3 specific improvement tips

Return ONLY valid JSON matching the required structure."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


# =============================================================================
# SCOUTING REPORT
# =============================================================================

SCOUTING_REPORT_SYSTEM_PROMPT = """You are a senior football scout at a top European club preparing an official scouting report. Generate professional, detailed reports suitable for presentation to club directors and technical staff.

Create a comprehensive scouting report in this EXACT JSON structure:
{
  "report_id": "<generated UUID-like string>",
  "report_date": "<current date YYYY-MM-DD>",
  "scout_classification": "<A+/A/B+/B/C - based on overall potential>",

  "player_profile": {
    "name": "<player name>",
    "age": <age>,
    "position": "<primary position>",
    "secondary_positions": ["<pos1>", "<pos2>"],
    "preferred_foot": "<Right/Left/Both>",
    "height_cm": <height>,
    "nationality": "<nationality if provided>"
  },

  "executive_summary": "<3-4 sentence high-level summary for directors>",

  "technical_assessment": {
    "grade": "<A-F>",
    "summary": "<2-3 sentences>",
    "key_strengths": ["<str1>", "<str2>"],
    "areas_for_development": ["<area1>", "<area2>"]
  },

  "physical_assessment": {
    "grade": "<A-F>",
    "summary": "<2-3 sentences>",
    "physical_profile": "<Power/Agile/Athletic/Developing>",
    "injury_risk": "<Low/Medium/High>"
  },

  "tactical_assessment": {
    "grade": "<A-F>",
    "summary": "<2-3 sentences>",
    "best_role": "<specific tactical role>",
    "tactical_flexibility": "<High/Medium/Low>",
    "systems_suited": ["<4-3-3>", "<4-2-3-1>"]
  },

  "mental_assessment": {
    "grade": "<A-F>",
    "summary": "<2-3 sentences>",
    "leadership_potential": "<High/Medium/Low>",
    "pressure_handling": "<Excellent/Good/Average/Needs Work>"
  },

  "performance_data": {
    "matches_analyzed": <number>,
    "overall_rating": <1-100>,
    "potential_rating": <1-100>,
    "key_statistics": {
      "pass_completion": "<percentage>",
      "duels_won": "<percentage>",
      "chances_created_per_90": <number>,
      "defensive_actions_per_90": <number>
    }
  },

  "comparison_analysis": {
    "similar_players": [
      {
        "name": "<pro player name>",
        "similarity": "<percentage>",
        "comparison_notes": "<1-2 sentences>"
      }
    ],
    "ceiling_comparison": "<best case pro player comparison>",
    "floor_comparison": "<worst case comparison>"
  },

  "development_pathway": {
    "current_level": "<Academy/Reserve/First Team Ready/Elite Ready>",
    "projected_level_2_years": "<level>",
    "projected_level_5_years": "<level>",
    "key_development_areas": [
      {
        "area": "<skill>",
        "priority": "<Critical/High/Medium>",
        "timeline": "<months>",
        "recommendation": "<specific training recommendation>"
      }
    ]
  },

  "market_assessment": {
    "current_value_estimate": "<range in currency>",
    "potential_value_estimate": "<range in currency>",
    "contract_recommendation": "<years>",
    "competition_level": "<Low/Medium/High - other clubs interested>"
  },

  "recommendation": {
    "action": "<Sign Immediately/Monitor Closely/Development Loan/Pass>",
    "confidence": "<High/Medium/Low>",
    "risk_level": "<Low/Medium/High>",
    "detailed_recommendation": "<3-4 sentences explaining the recommendation>"
  },

  "additional_notes": "<any other relevant observations>"
}"""


def scouting_report_messages(player_data: dict, analysis_data: dict) -> list[dict[str, str]]:
    user_prompt = f"""Generate a professional scouting report for this player:

Player Information:
{_dump(player_data)}

Video Analysis Data:
{_dump(analysis_data)}

Create a comprehensive, professional scouting report suitable for club directors. Be realistic and objective in assessments. Return ONLY valid JSON."""

    return [
        {"role": "system", "content": SCOUTING_REPORT_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


# =============================================================================
# CLUB MATCHING
# =============================================================================

CLUB_MATCHING_SYSTEM_PROMPT = """You are an expert football agent and career advisor who specializes in matching young players with suitable clubs. Analyze player profiles and club requirements to find optimal matches.

Given a player profile and available clubs, provide detailed matching analysis in this JSON structure:
{
  "matches": [
    {
      "club_id": "<club id>",
      "club_name": "<club name>",
      "match_score": <1-100>,
      "match_grade": "<A+/A/B+/B/C/D>",
      "position_fit": "<Primary/Secondary/Adaptable>",
      "style_compatibility": "<Excellent/Good/Fair/Poor>",
      "development_opportunity": "<Exceptional/Strong/Moderate/Limited>",
      "reasons": [
        "<reason 1 why this is a good match>",
        "<reason 2>",
        "<reason 3>"
      ],
      "concerns": [
        "<potential concern or challenge>"
      ],
      "recommendation": "<2-3 sentence specific recommendation>",
      "pathway_to_first_team": "<description of typical development path at this club>",
      "competition_level": "<Low/Medium/High - current competition for position>"
    }
  ],
  "overall_assessment": {
    "market_readiness": "<Ready Now/6 Months/12 Months/18+ Months>",
    "recommended_level": "<Elite/Top Division/Championship/Development>",
    "career_advice": "<3-4 sentences of personalized career guidance>",
    "next_steps": ["<action 1>", "<action 2>", "<action 3>"]
  },
  "top_recommendation": {
    "club_id": "<best match club id>",
    "confidence": "<High/Medium/Low>",
    "explanation": "<detailed 3-4 sentence explanation of why this is the best fit>"
  }
}

Rank all provided clubs by match score. Be realistic and consider both player development and club needs."""


def club_matching_messages(
    player_profile: dict,
    analysis_data: dict,
    preferences: Optional[dict],
    clubs: list[dict],
) -> list[dict[str, str]]:
    user_prompt = f"""Match this player with suitable clubs:

Player Profile:
{_dump(player_profile)}

Video Analysis Results:
{_dump(analysis_data)}

Player Preferences:
{_dump(preferences or {})}

Available Clubs:
{_dump(clubs)}

Analyze and rank all clubs by suitability. Consider:
1. Position requirements vs player position
2. Playing style compatibility
3. Development philosophy match
4. Age appropriateness
5. Player skill level vs club level
6. Career progression opportunities

Return ONLY valid JSON."""

    return [
        {"role": "system", "content": CLUB_MATCHING_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


# =============================================================================
# COACH CHAT
# =============================================================================

CHAT_SYSTEM_PROMPTS = {
    ChatIntent.PITCH: (
        "You are an expert football agent helping young players craft compelling pitch messages "
        "to professional clubs. Focus on highlighting achievements, potential, and professionalism. "
        "Keep responses concise and actionable. Format the pitch message in a professional structure."
    ),
    ChatIntent.EVALUATION: (
        "You are a professional football scout analyzing player potential. Provide honest, "
        "constructive evaluations focusing on technical skills, physical attributes, mental strength, "
        "and areas for improvement. Be encouraging but realistic."
    ),
    ChatIntent.IMPROVEMENT: (
        "You are an experienced football coach providing personalized training advice. Give specific, "
        "actionable tips that players can implement immediately. Focus on technical skills, tactical "
        "awareness, physical conditioning, and mental preparation."
    ),
    ChatIntent.PROFILE: (
        "You are a career advisor for young footballers. Help players understand what makes a strong "
        "profile: quality videos, detailed stats, professional presentation, and how to showcase their "
        "unique strengths to clubs."
    ),
    ChatIntent.GENERAL: (
        "You are PitchScout AI Coach, an expert football development assistant. Help players with "
        "pitch writing, evaluation, improvement tips, and profile building. Be supportive, "
        "professional, and specific in your guidance."
    ),
}


def coach_chat_messages(intent: ChatIntent, messages: list[dict[str, str]]) -> list[dict[str, str]]:
    system_prompt = CHAT_SYSTEM_PROMPTS.get(intent, CHAT_SYSTEM_PROMPTS[ChatIntent.GENERAL])
    return [{"role": "system", "content": system_prompt}, *messages]
