"""Resume AI backend: job-tailored resume generation and staged revision with Gemini."""
