"""
LLM Prompt Templates for Product Extraction
===========================================

Prompt templates used to turn document text into structured packaging
product records.

Two flows share one output schema:
1. `EXTRACTION_PROMPT_TEMPLATE` - whole document fits one request
2. `CHUNK_PROMPT_TEMPLATE` - one chunk of a document split by token budget

Both demand JSON-only output so the response parser can locate a single
`{"products": [...]}` object.

Usage:
------
```python
from src.services.prompts import build_extraction_prompt

system, user = build_extraction_prompt(text, "catalog.pdf")
response = await provider.complete(system, user, 0.1, 4000)
```
"""

from langchain_core.prompts import PromptTemplate

# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

EXTRACTION_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in extracting product information from "
    "supplier documents for a packaging marketplace. You understand packaging "
    "industry terminology and structure product data according to the "
    "marketplace database schema."
)

CHUNK_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in extracting product information from "
    "document chunks for a packaging marketplace. Focus on finding actual product "
    "information and avoid duplicates."
)

# =============================================================================
# OUTPUT SCHEMA
# =============================================================================
# Inserted through a partial variable so the JSON braces need no escaping.

PRODUCT_OUTPUT_FORMAT = """{
  "products": [
    {
      "name": "Product Name",
      "description": "Detailed product description",
      "category": "Primary category (e.g., Bottle, Jar, Tube, Cap, Other Closure)",
      "broaderCategory": "Broader category (e.g., Base Packaging, Closure)",
      "specifications": {
        "material": "Material type (e.g., HDPE, Glass, Aluminum, PP)",
        "capacity": {"value": numeric_value, "unit": "ml/oz/l"},
        "dimensions": {"height": numeric_value, "width": numeric_value, "depth": numeric_value, "unit": "mm/cm/in"},
        "weight": {"value": numeric_value, "unit": "g/kg/oz"},
        "color": "Color",
        "finish": "Finish",
        "closure": "Closure type",
        "minimumOrderQuantity": numeric_value,
        "availableQuantity": numeric_value
      },
      "pricing": {
        "basePrice": numeric_value,
        "currency": "USD",
        "priceBreaks": [{"minQuantity": numeric_value, "price": numeric_value}]
      },
      "sustainability": {
        "recycledContent": numeric_percentage_0_to_100,
        "biodegradable": boolean,
        "compostable": boolean,
        "refillable": boolean,
        "sustainableSourcing": boolean,
        "carbonNeutral": boolean
      },
      "categoryFilters": [{"Category_Specific_Filter_Name": ["Value1", "Value2"]}],
      "commonFilters": [{
        "Sustainability": ["Recycle Ready", "Recycled Content"],
        "Material": ["HDPE", "PP", "Glass"],
        "Size": ["Unit: ml", "Min: 20", "Max: 50"],
        "Minimum Order": ["Min: 500", "Max: 50000"],
        "Location": ["USA", "Europe"],
        "Color": ["Blue", "Clear"],
        "End Use": ["Hand Cream", "Body Wash", "Shampoo"]
      }],
      "features": ["Feature 1", "Feature 2"],
      "certifications": [],
      "customization": {
        "printingAvailable": boolean,
        "labelingAvailable": boolean,
        "colorOptions": [],
        "printingMethods": [],
        "customSizes": boolean
      }
    }
  ],
  "summary": {
    "totalProducts": number,
    "categories": ["category1", "category2"],
    "processingNotes": "Description of what was found"
  }
}"""

FILTERS_GUIDANCE = """CATEGORY-SPECIFIC FILTERS GUIDE:
- Tube: {"Tube Shape": ["Round", "Oval", "Square"], "Tube Type": ["Monomaterial", "Laminated", "Barrier"]}
- Bottle: {"Bottle Shape": ["Round", "Square", "Oval"], "Bottle Type": ["Standard", "Wide Mouth", "Narrow Neck"]}
- Jar: {"Jar Shape": ["Round", "Square", "Oval"], "Jar Type": ["Standard", "Wide Mouth", "Straight Sided"]}
- Cap: {"Cap Type": ["Screw Cap", "Snap Cap", "Flip Top"], "Cap Size": ["18mm", "20mm", "24mm", "28mm"]}
- Other Closure: {"Other Closure Type": ["Pump", "Spray", "Dropper", "Dispenser"]}

COMMON FILTERS GUIDE:
- Sustainability: ["Recycle Ready", "Recycled Content", "Biodegradable", "Compostable", "Carbon Neutral"]
- Material: ["HDPE", "PP", "Glass", "Aluminum", "PET", "PETG", "Acrylic"]
- Size: use ["Unit: ml", "Min: 20", "Max: 50"] for capacity ranges
- Minimum Order: use ["Min: 500", "Max: 50000"] for order quantities
- Location: ["USA", "Europe", "Asia", "Canada", "Mexico"]
- Color: ["Clear", "Amber", "Blue", "Green", "White", "Black", "Natural"]
- End Use: ["Hand Cream", "Body Wash", "Shampoo", "Hair Oil", "Body Lotion", "Face Cream", "Perfume"]"""

# =============================================================================
# SINGLE-DOCUMENT PROMPT
# =============================================================================

EXTRACTION_PROMPT_TEMPLATE = PromptTemplate.from_template(
    """You are processing a file named "{file_name}" for the marketplace product database.

Extract product information from the following text and structure it according to the database schema.

EXTRACTED TEXT:
{text}

CRITICAL INSTRUCTIONS:
1. If the text contains NO actual product information, return an empty products array
2. Only extract information about actual physical products (bottles, jars, caps, etc.)
3. Ignore instructional text, headers, metadata, or placeholder content
4. Focus on packaging industry terminology and specifications
5. Map products to appropriate category-specific and common filters
6. If information is missing, omit the field rather than inventing a value

REQUIRED OUTPUT FORMAT (JSON ONLY - NO OTHER TEXT):
{output_format}

{filters_guidance}

IMPORTANT:
- If NO actual products are found, return: {{"products": [], "summary": {{"totalProducts": 0, "categories": [], "processingNotes": "No product information found"}}}}
- Only return valid JSON, no explanatory text before or after
- Ensure all numeric values are numbers, not strings"""
).partial(output_format=PRODUCT_OUTPUT_FORMAT, filters_guidance=FILTERS_GUIDANCE)

# =============================================================================
# CHUNK PROMPT
# =============================================================================

CHUNK_PROMPT_TEMPLATE = PromptTemplate.from_template(
    """You are processing chunk {chunk_number} of {total_chunks} from file "{file_name}" for the marketplace product database.

CHUNK TEXT:
{text}

INSTRUCTIONS:
1. Extract ONLY actual product information from this chunk
2. Ignore instructional text, headers, metadata, or navigation elements
3. Focus on physical products: bottles, jars, caps, containers, packaging materials
4. If no products are found in this chunk, return an empty products array
5. Avoid duplicating products that might appear in other chunks

REQUIRED OUTPUT FORMAT (JSON ONLY):
{output_format}

Only return valid JSON, no explanatory text before or after."""
).partial(output_format=PRODUCT_OUTPUT_FORMAT)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def build_extraction_prompt(text: str, file_name: str) -> tuple[str, str]:
    """
    Build the (system, user) prompt pair for a whole document.

    Args:
        text: Filtered document text
        file_name: Original file name, for context only

    Returns:
        Tuple of system prompt and user prompt
    """
    user_prompt = EXTRACTION_PROMPT_TEMPLATE.format(file_name=file_name, text=text)
    return EXTRACTION_SYSTEM_PROMPT, user_prompt


def build_chunk_prompt(
    text: str,
    file_name: str,
    chunk_number: int,
    total_chunks: int,
) -> tuple[str, str]:
    """
    Build the (system, user) prompt pair for one chunk.

    Args:
        text: Chunk text
        file_name: Original file name, for context only
        chunk_number: 1-based position of the chunk in processing order
        total_chunks: Number of chunks in the document
    """
    user_prompt = CHUNK_PROMPT_TEMPLATE.format(
        file_name=file_name,
        chunk_number=chunk_number,
        total_chunks=total_chunks,
        text=text,
    )
    return CHUNK_SYSTEM_PROMPT, user_prompt
