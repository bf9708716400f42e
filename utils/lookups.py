"""Lookup tables for activity attributes, filter names, etc.
"""

# Crisp positions of API values on the [0, 1] fuzzy domains.
# Unrecognised values map to DEFAULT_FUZZY_VALUE.
DEFAULT_FUZZY_VALUE = 0.5

difficulty_values = {
    "easy": 0.2,
    "medium": 0.5,
    "difficult": 0.8,
    # Parser-side labels
    "low": 0.2,
    "high": 0.8,
}

time_needed_values = {
    "< 1 h": 0.1,
    "1 - 2 h": 0.25,
    "2 - 4 h": 0.4,
    "> 4 h": 0.6,
    "half a day": 0.5,
    "a day": 0.75,
    "several days": 0.9,
    # Parser-side labels
    "lessthan1hour": 0.1,
    "between1_2hours": 0.25,
    "between2_4hours": 0.4,
    "between4_8hours": 0.6,
    "morethan1day": 0.9,
}

experience_categories = ["outdoor", "culture", "culinary", "wellness",
                         "adventure", "family"]

# category: (partial membership, keywords that trigger it)
experience_cross_memberships = {
    "adventure": (0.6, ("outdoor", "sport")),
    "family": (0.5, ("easy", "accessible")),
    "wellness": (0.7, ("relax",)),
}

# Filters compared when scoring a parser against the gold standard
filter_keys = ["experience_type", "needed_time", "difficulty", "suitable_for"]


"""
Helper that looks up synonyms for an activity attribute. The time an activity
takes could be "neededTime", "needed_time", "time_needed" or "Time needed".
This should be an unordered link between adjacent terms.

The strings are:
* "api_field": The field name in the tourism API / parser output
* "label": The pretty label for reports and plots
* "mf_name": The name of the fuzzy variable, if the attribute has one
* "filter_key": The key in gold-standard expected filters
"""
class Lookup:
    def __init__(self):
        """Find keys and values naming an activity attribute.

        Usage:
            from utils.lookups import Lookup

            lookup = Lookup()
            result = lookup.find_vrbl_keys('neededTime')

        Attributes:
            self.string_dict (dict): Dictionary of synonym keys for attributes.
        """
        self.string_dict = {
            "time": {'api_field': 'neededTime', 'label': 'Time needed',
                     'mf_name': 'time_needed', 'filter_key': 'needed_time'},
            "difficulty": {'api_field': 'difficulty', 'label': 'Difficulty',
                           'mf_name': 'difficulty',
                           'filter_key': 'difficulty'},
            "experience": {'api_field': 'experienceType',
                           'label': 'Experience type',
                           'filter_key': 'experience_type'},
            "audience": {'api_field': 'suitableFor', 'label': 'Suitable for',
                         'mf_name': 'suitability',
                         'filter_key': 'suitable_for'},
        }

    def find_vrbl_keys(self, value):
        """Find the dictionary of keys for a given attribute.

        Args:
            value (str): Any synonym of the attribute.

        Returns:
            dict: The dictionary of keys for the attribute, or None.
        """
        for key, val in self.string_dict.items():
            if value in val.values():
                return self.string_dict[key]
        return None

    def get_key(self, vrbl, _type):
        return self.string_dict[vrbl][_type]
