"""
Prompt templates for document classification and data extraction.
"""

CLASSIFICATION_PROMPT = """Analyze this PDF document and classify it.

Return a JSON object with the following structure:
{
  "document_type": "string - the primary type of document (e.g., 'invoice', 'contract', 'resume', 'report', 'letter', 'form', 'receipt', 'statement', 'manual', 'other')",
  "confidence": number between 0 and 1,
  "reasoning": "string - detailed explanation of why you classified it this way, including key indicators you found",
  "subtypes": ["array of more specific classifications if applicable"],
  "language": "string - primary language of the document"
}

Be thorough in your reasoning - explain what specific elements led to your classification."""


EXTRACTION_PROMPT_TEMPLATE = """You are extracting structured data from a {document_type} document.

Use the following JSON schema for the extraction:
{schema}

For each field you extract, also identify:
1. The exact source text from the document that contains this information
2. The page number where you found it (1-indexed)
3. Your confidence level (0-1) in the extraction

Return a JSON object with this structure:
{{
  "schema_used": "{document_type}",
  "data": {{
    // The extracted data matching the schema
  }},
  "fields": [
    {{
      "name": "field_name",
      "value": "extracted value",
      "source_text": "exact text from document",
      "page_number": 1,
      "confidence": 0.95
    }}
  ]
}}

Be precise with source_text - it should be the exact text that appears in the document.
If a value is not present in the document, return null for it. DO NOT HALLUCINATE."""


def build_classification_prompt() -> str:
    """Return the prompt sent with a document to classify it."""
    return CLASSIFICATION_PROMPT


def build_extraction_prompt(document_type: str, schema: str) -> str:
    """
    Build the extraction prompt for a document type.

    Args:
        document_type: Label the document was classified as.
        schema: JSON schema text describing the fields to extract.

    Returns:
        The extraction prompt string.
    """
    return EXTRACTION_PROMPT_TEMPLATE.format(document_type=document_type, schema=schema)
