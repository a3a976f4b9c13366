"""SkillBridge: matches students to nearby businesses for cold outreach."""
