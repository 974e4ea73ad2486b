CHUNK_USER_TEMPLATE = """Documentation chunk:

{chunk}"""


TICKET_DESCRIPTION_PROMPT = """You are drafting a YouTrack issue description for a PMS API analysis result.
Use the provided JSON only. Do not invent details.
Write clear sections with short headings and bullet points where useful.
Keep the description concise and actionable.
"""
