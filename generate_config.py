import os
import sys
import pandas as pd
from campaign_carbon import constants
from campaign_carbon.config import DEFAULT_CONFIG_PATH

# Key -> (Unit, Section, Description). Keys match the names read in constants.py.
PARAMS = {
    "EF_PLATFORM_GOOGLE": ("gCO2e/impression", "1. Distribution", "Google Search Ads."),
    "EF_PLATFORM_GOOGLE_DISPLAY": ("gCO2e/impression", "1. Distribution", "Google Display Ads."),
    "EF_PLATFORM_YOUTUBE": ("gCO2e/impression", "1. Distribution", "YouTube video ads (30-second ad)."),
    "EF_PLATFORM_META": ("gCO2e/impression", "1. Distribution", "Meta Ads (Facebook/Instagram)."),
    "EF_PLATFORM_TIKTOK": ("gCO2e/impression", "1. Distribution", "TikTok Ads."),
    "EF_PLATFORM_PROGRAMMATIC": ("gCO2e/impression", "1. Distribution", "Programmatic display."),
    "EF_PLATFORM_BING": ("gCO2e/impression", "1. Distribution", "Microsoft Bing Ads."),
    "EF_PLATFORM_PINTEREST": ("gCO2e/impression", "1. Distribution", "Pinterest Ads."),
    "EF_PLATFORM_REDDIT": ("gCO2e/impression", "1. Distribution", "Reddit Ads."),
    "EF_PLATFORM_LINKEDIN": ("gCO2e/impression", "1. Distribution", "LinkedIn Ads."),
    "EF_ASSET_TEXT": ("gCO2e/asset", "2. Assets (by type)", "Text asset."),
    "EF_ASSET_IMAGE": ("gCO2e/asset", "2. Assets (by type)", "Image asset."),
    "EF_ASSET_VIDEO": ("gCO2e/asset", "2. Assets (by type)", "Video asset."),
    "EF_ASSET_MIXED": ("gCO2e/asset", "2. Assets (by type)", "Mixed media asset."),
    "EF_ASSET_UNSURE": ("gCO2e/asset", "2. Assets (by type)", "Fallback when the asset type is unknown; overrides other selections."),
    "EF_AI_IMAGE_G": ("gCO2e/image", "3. Assets (itemized)", "AI-generated image."),
    "EF_AI_TEXT_PER_300_TOKENS_G": ("gCO2e/300 tokens", "3. Assets (itemized)", "AI text generation per 300 tokens."),
    "EF_AI_VIDEO_PER_2_SECONDS_G": ("gCO2e/2 s", "3. Assets (itemized)", "AI video generation per 2 seconds."),
    "EF_LAPTOP_PER_MONTH_G": ("gCO2e/laptop-month", "4. Hardware & Storage", "Laptop lifecycle emissions allocated per month."),
    "EF_STORAGE_PER_GB_MONTH_G": ("gCO2e/GB-month", "4. Hardware & Storage", "Cloud storage."),
    "GREEN_CLOUD_REDUCTION": ("Fraction", "4. Hardware & Storage", "Reduction applied to storage on renewable-powered clouds."),
    "CAR_KGCO2_PER_KM": ("kgCO2e/km", "5. Equivalents", "Average passenger car."),
    "TYPICAL_DRIVING_KGCO2_PER_MONTH": ("kgCO2e/30 days", "5. Equivalents", "Typical monthly driving."),
    "SEVERITY_MEDIUM_KG": ("kgCO2e", "6. Severity", "Lower bound of the medium tier."),
    "SEVERITY_HIGH_KG": ("kgCO2e", "6. Severity", "Lower bound of the high tier."),
    "SEVERITY_VERY_HIGH_KG": ("kgCO2e", "6. Severity", "Lower bound of the very-high tier."),
}


def build_parameter_frame() -> pd.DataFrame:
    data = []
    for key, (unit, section, description) in PARAMS.items():
        data.append({
            "Key": key,
            "Value": getattr(constants, key),
            "Unit": unit,
            "Section": section,
            "Description": description,
        })
    return pd.DataFrame(data, columns=["Key", "Value", "Unit", "Section", "Description"])


def generate_excel(output_file: str = DEFAULT_CONFIG_PATH):
    df = build_parameter_frame()
    os.makedirs(os.path.dirname(output_file), exist_ok=True)
    print(f"Generating {output_file}...")
    df.to_excel(output_file, index=False)
    print("Done.")


if __name__ == "__main__":
    generate_excel(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH)
