""" Script to preprocess the user queries
    1. convert incoming query as lower case
    2. split incoming text into word tokens after stripping punctuation.
    3. check if the year value is 4-digits
    4. parse floats/ints safely - ratings and limits
    5. extract a year from catalog date strings
    6. strip code fences around model output

"""
import re
import math

# number words we accept as an explicit count
WORD_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "fifteen": 15, "twenty": 20,
    "thirty": 30, "forty": 40, "fifty": 50,}

# tokens: words, numbers, years ranges and comparison operators
TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9.\-'+/]*|[<>]=?|\+")

# nouns that follow an explicit count e.g. '5 movies'
COUNT_NOUNS = (
    "movies", "movie", "films", "film", "shows", "show", "series",
    "titles", "picks", "recommendations", "results", "options", "episodes")


# convert text as lower text and strip the outer spaces
def convert_text_to_lower_case(text: str):
    """Function to convert the text lower-case and strip outer spaces.

    Args:
        text (str): Incoming text from user's query.

    Returns:
        text (str): lower case and striped from outer spaces.
    """
    # None safe
    if not text:
        return ""
    # convert to lower case and remove leading and trailing spaces
    return str(text).lower().strip()


# split text into words
def split_text_into_words_corpus(text: str):
    """Function to split text into word tokens, dropping punctuation like ',' or '?'.

    Args:
        text (str): Incoming text from user's query.

    Returns:
        list containing the tokens after split.
    """
    # en/em dashes in ranges like '2010–2015' read as a hyphen
    lowered = convert_text_to_lower_case(text).replace("–", "-").replace("—", "-")
    # tokens are matched on the lower-case copy
    words = TOKEN_PATTERN.findall(lowered)
    # drop trailing sentence punctuation the pattern keeps (e.g. '2015.')
    return [word.rstrip(".") or word for word in words]


# check for year in text
def is_four_digit_year(text: str) -> bool:
    """Function to check if a string is a valid year like '1999' or '2015'.

    Args:
        text (str): Incoming text from user's query.

    Returns:
        Boolean(True/False)

    """
    text = str(text)
    # check if length is 4 and all digits
    if len(text) != 4 or not text.isdigit():
        return False

    # accept years from 1900 to 2099
    return 1900 <= int(text) <= 2099


# parse float value from text
def parse_float_safe(text):
    """Function to parse a float from a text string.

    Args:
        text (str): Incoming text from user's query.

    Returns:
        Return None on failure.
    """
    # bools are ints in python, they are never a rating
    if isinstance(text, bool) or text is None:
        return None
    try:
        value = float(str(text).strip().rstrip("+"))
    except (TypeError, ValueError):
        return None
    # nan and infinity never make a rating or a count
    if not math.isfinite(value):
        return None
    return value


# parse int value from text
def parse_int_safe(text):
    """Function to parse an integer from a text string, number word or float.

    Returns:
        int or None on failure.
    """
    if isinstance(text, bool) or text is None:
        return None
    if isinstance(text, int):
        return text
    # number words like 'five'
    word = str(text).strip().lower()
    if word in WORD_NUMBERS:
        return WORD_NUMBERS[word]
    value = parse_float_safe(word)
    if value is None:
        return None
    return int(value)


# year value processor from date text
def extract_year_from_text(date_text: str) -> int:
    """Function to extract a 4-digit year from a date string.
        - Checks if the first 4 characters form a valid year (ISO dates from the catalog).
        - If not, scans through the string to find the first 4-digit number.
        - Returns the year as an integer, or 0 if nothing found.

    Args:
        date_text (str): Input text containing a year value e.g. '2012-05-04'.

    Returns:
        int: Extracted 4-digit year or 0 if not found.
    """
    # if the input is empty or None then return 0
    if not date_text:
        return 0
    date_text = str(date_text)

    # catalog dates are YYYY-MM-DD
    if date_text[:4].isdigit():
        return int(date_text[:4])

    # else scan the text from start to end
    for i in range(len(date_text) - 3):
        # take a chunk of 4 consecutive characters
        four_char_segment = date_text[i : i + 4]
        # if this chunk is all digits, treat it as a year
        if four_char_segment.isdigit():
            return int(four_char_segment)

    # if no 4-digit number was found, return 0
    return 0


# find an explicit count in the text
def get_count_from_text(text: str):
    """Function to find an explicit small count like 'top 20', '5 movies' or 'give me three'.

    Args:
        text (str): Incoming text from user's query.

    Returns:
        int or None when no explicit count is present. Not clamped.
    """
    words_list = split_text_into_words_corpus(text)

    for index, word in enumerate(words_list):
        next_word = words_list[index + 1] if index + 1 < len(words_list) else ""
        # 'top 20' / 'top five'
        if word in ("top", "best") and next_word:
            count = _small_count(next_word)
            if count is not None:
                return count
        # '20 movies' / 'five films'
        count = _small_count(word)
        if count is not None and next_word in COUNT_NOUNS:
            return count
        # 'give me 3' / 'show me 7'
        if word == "me" and index > 0 and words_list[index - 1] in ("give", "show", "find", "recommend", "suggest"):
            count = _small_count(next_word) if next_word else None
            if count is not None:
                return count

    return None


def _small_count(word: str):
    # years are never counts
    if word.isdigit() and len(word) <= 3:
        return int(word)
    return WORD_NUMBERS.get(word)


# strip code fences around a model reply
def strip_code_fences(text: str) -> str:
    """Function to remove markdown code fences and any chatter around a JSON object.

    Args:
        text (str): Raw text payload from the language model.

    Returns:
        str: the substring from the first '{' to the last '}', or '' if there is none.
    """
    if not text:
        return ""
    cleaned = str(text).strip()
    # drop ```json ... ``` markers
    cleaned = re.sub(r"^```[a-zA-Z]*\s*", "", cleaned)
    cleaned = re.sub(r"\s*```$", "", cleaned)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        return ""
    return cleaned[start : end + 1]
