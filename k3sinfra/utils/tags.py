from typing import Dict, List, Optional

def get_default_tags(project: str, environment: str = "Demo") -> Dict[str, str]:
    """
    Get default tags for the resources of a deployment.

    Args:
        project: Name of the project
        environment: Environment name (Demo, dev, prod, etc.)

    Returns:
        Dict[str, str]: Dictionary of default tags
    """
    return {
        "Project": project,
        "Environment": environment,
    }

def merge_tags(*tag_sets: Optional[Dict[str, str]]) -> Dict[str, str]:
    """
    Combine tag dictionaries into a new one. Later sets win on key clashes
    and None entries are skipped, so optional tags can be passed as is.

    Example:
        merge_tags(get_default_tags("VXG"), {"Name": "vxg-k3s-demo"})
    """
    merged: Dict[str, str] = {}
    for tags in tag_sets:
        merged.update(tags or {})
    return merged

def to_tag_specifications(resource_type: str, tags: Dict[str, str]) -> List[Dict]:
    """
    Convert a tag dictionary to the EC2 TagSpecifications structure.

    Args:
        resource_type: EC2 resource type (instance, security-group, key-pair)
        tags: Tags to apply

    Returns:
        List[Dict]: TagSpecifications value, empty when there are no tags
    """
    if not tags:
        return []
    return [{
        "ResourceType": resource_type,
        "Tags": [{"Key": key, "Value": value} for key, value in tags.items()],
    }]
