"""
Prompt templates for the content-analysis operations.

Templates are `str.format` strings; literal JSON braces are doubled.
"""

CONTENT_CATEGORIES = (
    "Education",
    "Health",
    "Environment",
    "Technology",
    "Social Issues",
    "Economy",
    "Culture",
    "Sports",
    "Politics",
    "Other",
)

# ---------------------------------------------------------------------
# analyze_articles
# ---------------------------------------------------------------------

ANALYZE_ARTICLES_SYSTEM_PROMPT = (
    "You are an expert content analyst. Provide detailed, actionable insights "
    "from article content."
)

ANALYZE_ARTICLES_PROMPT = """Analyze the following articles and provide insights:

{content}

Please provide:
1. Main themes and topics
2. Sentiment analysis (positive, negative, neutral)
3. Key insights and trends
4. Recommendations for content strategy
5. Most engaging topics

Format your response as JSON with the following structure:
{{
  "themes": ["theme1", "theme2"],
  "sentiment": {{"positive": 0.6, "negative": 0.2, "neutral": 0.2}},
  "insights": ["insight1", "insight2"],
  "recommendations": ["rec1", "rec2"],
  "top_topics": ["topic1", "topic2"]
}}"""

# ---------------------------------------------------------------------
# extract_insights
# ---------------------------------------------------------------------

EXTRACT_INSIGHTS_SYSTEM_PROMPT = (
    "You are an expert data analyst. Extract meaningful insights from content."
)

EXTRACT_INSIGHTS_PROMPT = """Extract key insights from the following content:

{content}

Please provide:
1. Key trends and patterns
2. Important statistics or metrics
3. Notable quotes or statements
4. Actionable recommendations
5. Areas for further investigation

Format as JSON with this structure:
{{
  "trends": ["trend1", "trend2"],
  "statistics": ["stat1", "stat2"],
  "quotes": ["quote1", "quote2"],
  "recommendations": ["rec1", "rec2"],
  "investigation_areas": ["area1", "area2"]
}}"""

# ---------------------------------------------------------------------
# generate_summaries
# ---------------------------------------------------------------------

SUMMARY_SYSTEM_PROMPT = (
    "You are an expert summarizer. Create concise, informative summaries."
)

SUMMARY_PROMPT = """Summarize the following content in 2-3 sentences, focusing on the key points:

{content}"""

# ---------------------------------------------------------------------
# categorize_content
# ---------------------------------------------------------------------

CATEGORIZE_SYSTEM_PROMPT = (
    "You are a content categorization expert. Choose the most appropriate category."
)

CATEGORIZE_PROMPT = (
    "Categorize the following content into one of these categories:\n"
    + "\n".join(f"- {name}" for name in CONTENT_CATEGORIES)
    + "\n\nContent: {content}\n\nRespond with only the category name."
)

# ---------------------------------------------------------------------
# sentiment_analysis
# ---------------------------------------------------------------------

SENTIMENT_SYSTEM_PROMPT = (
    "You are a sentiment analysis expert. Analyze text sentiment accurately."
)

SENTIMENT_PROMPT = """Analyze the sentiment of the following content and respond with a JSON object containing:
- sentiment: "positive", "negative", or "neutral"
- confidence: a number between 0 and 1
- reasoning: brief explanation

Content: {content}

Respond with only the JSON object."""
