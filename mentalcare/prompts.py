from jinja2 import Environment, StrictUndefined

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)

ANALYZE_SENTIMENT = _env.from_string(
    "You are a mental health assistant. Analyze the sentiment of the following user message. "
    "The possible sentiments are: happy, sad, anxious, stressed, neutral. "
    "If the user expresses thoughts of self-harm or suicide, or any other indication of severe "
    'distress, set the sentiment to "severe_distress" and isDistress to true. '
    "For every other sentiment isDistress must be false.\n"
    "\n"
    'Respond with JSON only: {"sentiment": string, "isDistress": boolean}\n'
    "\n"
    "Message: {{ message }}"
)

SUPPORTIVE_REPLY = _env.from_string(
    "You are a mental health support chatbot. Your tone should be empathetic and understanding. "
    "Generate a short, supportive reply (one or two sentences) to the user's message, based on "
    "its sentiment. Never judge or dismiss the user's feelings.\n"
    "\n"
    "User Message: {{ userMessage }}\n"
    "Sentiment: {{ sentiment }}\n"
    "\n"
    'Respond with JSON only: {"reply": string}'
)

PROCESS_MESSAGE = _env.from_string(
    "You are a mental health assistant. Your tone should be empathetic and understanding.\n"
    "Analyze the following user message and generate a response.\n"
    "\n"
    "You must perform three tasks:\n"
    "1. Analyze Sentiment: Determine the sentiment of the message. The possible sentiments are: "
    "happy, sad, anxious, stressed, neutral. If the user expresses thoughts of self-harm, suicide, "
    'or any other indication of severe emotional crisis, set the sentiment to "severe_distress".\n'
    '2. Detect Distress: if the sentiment is "severe_distress", set "isDistress" to true. '
    "Otherwise, set it to false.\n"
    "3. Generate Reply:\n"
    "   - If the sentiment is 'sad', 'anxious', or 'stressed', generate a short, supportive reply "
    "(one or two sentences).\n"
    "   - If the sentiment is 'happy', 'neutral', or 'severe_distress', return an empty string for "
    "'aiMessage'. For severe distress a separate mechanism provides a helpline, so do not "
    "generate a message here.\n"
    "\n"
    "Never judge or dismiss the user's feelings.\n"
    "\n"
    'Respond with JSON only: {"sentiment": string, "isDistress": boolean, "aiMessage": string}\n'
    "\n"
    "Message: {{ message }}"
)


def render(template, **values) -> str:
    return template.render(**values)
